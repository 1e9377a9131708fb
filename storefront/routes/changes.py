# storefront/routes/changes.py
import json

from flask import Blueprint, Response, current_app, request

changes_bp = Blueprint("changes", __name__)


def _event_stream(subscription, keepalive):
    try:
        while True:
            message = subscription.get(timeout=keepalive)
            if message is None:
                yield ': keepalive\n\n'
            else:
                yield f"data: {json.dumps(message)}\n\n"
    finally:
        subscription.close()


@changes_bp.route('/changes')
def stream_changes():
    tables = [t.strip() for t in request.args.get('tables', '').split(',') if t.strip()]
    feed = current_app.extensions['change_feed']
    # subscribed before streaming starts; closed with the response
    subscription = feed.subscribe(tables)
    response = Response(
        _event_stream(subscription, current_app.config['CHANGE_FEED_KEEPALIVE']),
        mimetype='text/event-stream',
        headers={'Cache-Control': 'no-cache', 'X-Accel-Buffering': 'no'},
    )
    response.call_on_close(subscription.close)
    return response
