import asyncio
import logging

from flask import Blueprint, current_app, request, jsonify

from models.errors import ErrorKind, GeoError
from services.logparser import process_hub_log
from utils.helpers import location_marker, utcnow_iso

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')

# HTTP status for each per-address error kind
ERROR_STATUS = {
    ErrorKind.INVALID_ADDRESS: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.RESPONSE_PARSE_ERROR: 502,
    ErrorKind.TRANSPORT_ERROR: 502,
    ErrorKind.CORRUPT_ENTRY: 500,
}


def _state():
    return current_app.extensions['hubble']


def _refresh_if_changed():
    """Re-process the hub log when watching and the file changed"""
    state = _state()
    monitor = state.get('monitor')
    if monitor is None or not monitor.changed():
        return
    try:
        process_hub_log(state['geolocator'], state['hub_log_file'])
    except FileNotFoundError as e:
        logger.error("Error processing log file: %s", e)


# ============================================================================
# Location Endpoints
# ============================================================================

@api_bp.route('/locations', methods=['GET'])
def locations():
    """
    List map markers for every cached location

    Request:
        GET /api/locations

    Response:
        {
            "count": 2,
            "markers": [
                {"ip": "1.2.3.4", "lat": 10.0, "lon": 20.0, "city": "...", "country": "US"},
                ...
            ]
        }
    """
    _refresh_if_changed()
    geolocator = _state()['geolocator']

    async def collect():
        markers = []
        for ip in list(geolocator.keys()):
            location = await geolocator.lookup(ip)
            if isinstance(location, GeoError):
                logger.warning("Failed to get location for IP %s: %s", ip, location.message)
                continue
            markers.append(location_marker(ip, location))
        return markers

    markers = asyncio.run(collect())
    return jsonify({"count": len(markers), "markers": markers})


@api_bp.route('/lookup', methods=['GET'])
def lookup():
    """
    Get geolocation information for one IP address

    Request:
        GET /api/lookup?ip=x.x.x.x

    Response:
        Location fields on success, {"error": ..., "kind": ...} otherwise
    """
    ip = request.args.get('ip', '').strip()
    if not ip:
        return jsonify({"error": "No IP provided"}), 400

    result = asyncio.run(_state()['geolocator'].lookup(ip))
    if isinstance(result, GeoError):
        return jsonify(result.to_dict()), ERROR_STATUS.get(result.kind, 500)
    return jsonify(result.to_dict())


@api_bp.route('/refresh', methods=['POST'])
def refresh():
    """
    Re-read the hub log and look up any new addresses

    Response:
        {"count": 12}  # keys known after the merge
    """
    state = _state()
    if not state.get('hub_log_file'):
        return jsonify({"error": "No hub log file configured"}), 400

    try:
        keys = process_hub_log(state['geolocator'], state['hub_log_file'])
    except FileNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify({"count": len(keys)})


@api_bp.route('/save', methods=['POST'])
def save():
    """Flush the cache to its data file"""
    if not _state()['geolocator'].save():
        return jsonify({"error": "Error saving GeoIP data file"}), 500
    return jsonify({"saved": True})


# ============================================================================
# Health Check Endpoint
# ============================================================================

@api_bp.route('/health', methods=['GET'])
def health():
    """
    Health check endpoint for monitoring

    Response:
        {
            "status": "healthy",
            "timestamp": "ISO timestamp",
            "locations": 12,
            "api_enabled": true
        }
    """
    geolocator = _state()['geolocator']
    return jsonify({
        "status": "healthy",
        "timestamp": utcnow_iso(),
        "locations": geolocator.size(),
        "api_enabled": geolocator.enable_api
    })
