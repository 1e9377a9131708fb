# storefront/changes.py
"""
In-process change feed.

Committed inserts, updates and deletes are published as
``{"table", "event", "id"}`` messages. Subscribers pick the tables they
care about and drain their own queue; a client is expected to re-run its
fetch on every message. Nothing is ordered, merged or debounced.
"""
import itertools
import logging
import queue
import threading

from flask import current_app, has_app_context
from flask_sqlalchemy.session import Session
from sqlalchemy import event

logger = logging.getLogger(__name__)

PENDING_KEY = 'pending_changes'


class Subscription:
    def __init__(self, feed, sub_id, tables):
        self._feed = feed
        self.id = sub_id
        self.tables = frozenset(tables)
        self.queue = queue.Queue()

    def wants(self, table):
        return not self.tables or table in self.tables

    def get(self, timeout=None):
        """Next message, or None when nothing arrived within ``timeout``."""
        try:
            return self.queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self):
        self._feed.unsubscribe(self)


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions = {}
        self._ids = itertools.count(1)

    def subscribe(self, tables=()):
        with self._lock:
            sub = Subscription(self, next(self._ids), tables)
            self._subscriptions[sub.id] = sub
        logger.debug("Subscription %s opened for %s", sub.id, sorted(sub.tables) or 'all tables')
        return sub

    def unsubscribe(self, sub):
        with self._lock:
            self._subscriptions.pop(sub.id, None)

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subscriptions)

    def publish(self, message):
        with self._lock:
            targets = [s for s in self._subscriptions.values() if s.wants(message['table'])]
        for sub in targets:
            sub.queue.put(message)


def _record_changes(session, flush_context):
    pending = session.info.setdefault(PENDING_KEY, [])
    for kind, objects in (('INSERT', session.new), ('UPDATE', session.dirty), ('DELETE', session.deleted)):
        for obj in objects:
            table = getattr(obj, '__tablename__', None)
            if table is None:
                continue
            if kind == 'UPDATE' and not session.is_modified(obj, include_collections=False):
                continue
            pending.append({'table': table, 'event': kind, 'id': getattr(obj, 'id', None)})


def _publish_changes(session):
    changes = session.info.pop(PENDING_KEY, [])
    if not changes or not has_app_context():
        return
    feed = current_app.extensions.get('change_feed')
    if feed is None:
        return
    for message in changes:
        feed.publish(message)


def _discard_changes(session):
    session.info.pop(PENDING_KEY, None)


def init_change_feed(app):
    app.extensions['change_feed'] = ChangeFeed()
    # after_flush still exposes the pre-flush new/dirty/deleted sets, with ids assigned
    if not event.contains(Session, 'after_flush', _record_changes):
        event.listen(Session, 'after_flush', _record_changes)
        event.listen(Session, 'after_commit', _publish_changes)
        event.listen(Session, 'after_rollback', _discard_changes)
    return app.extensions['change_feed']
