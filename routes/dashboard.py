"""
Dashboard Routes Module
World map of hub locations
"""

from flask import Blueprint, current_app, render_template_string

dashboard_bp = Blueprint('dashboard', __name__)

MAP_HTML = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width,initial-scale=1">
  <title>Hub Locations</title>
  <link rel="stylesheet" href="https://unpkg.com/leaflet@1.9.4/dist/leaflet.css" crossorigin="anonymous"/>
  <script src="https://unpkg.com/leaflet@1.9.4/dist/leaflet.js" crossorigin="anonymous"></script>
  <style>
    html,body{margin:0;height:100%;background:#0f172a;color:#e2e8f0;font-family:Inter,system-ui;}
    #map{height:calc(100% - 40px);}
    header{height:40px;line-height:40px;padding:0 16px;}
  </style>
</head>
<body>
  <header>Hub Locations &middot; <span id="count">0</span> hubs</header>
  <div id="map"></div>
  <script>
  let map = L.map('map').setView([20, 0], 2);
  L.tileLayer('https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png', { maxZoom: 6 }).addTo(map);
  let markersLayer = L.layerGroup().addTo(map);

  async function loadMarkers() {
    const resp = await fetch("{{ url_for('api.locations') }}");
    if (!resp.ok) return;
    const data = await resp.json();
    markersLayer.clearLayers();
    for (const m of data.markers) {
      const popup = document.createElement('div');
      const title = document.createElement('b');
      title.textContent = m.ip;
      popup.appendChild(title);
      popup.appendChild(document.createElement('br'));
      popup.appendChild(document.createTextNode(`${m.city || ''} ${m.country || ''}`));
      L.circleMarker([m.lat, m.lon], {radius: 5, color: 'red'}).bindPopup(popup).addTo(markersLayer);
    }
    document.getElementById('count').textContent = data.count;
  }

  loadMarkers();
  {% if refresh_ms %}setInterval(loadMarkers, {{ refresh_ms }});{% endif %}
  </script>
</body>
</html>
"""


@dashboard_bp.route('/')
def index():
    """
    Map page

    Polls /api/locations when the hub log is being watched.
    """
    state = current_app.extensions['hubble']
    refresh_ms = state['refresh_seconds'] * 1000 if state.get('monitor') else 0
    return render_template_string(MAP_HTML, refresh_ms=refresh_ms)
