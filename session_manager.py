"""
Session Manager for RideCalc
Keeps the host's numeric fields and the calculator sessions editing them
"""
import logging
import math
import threading
import time
import uuid

import config
from actions import Action
from session import CalculatorSession
from text_field import CalculatorTextField

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, fields=config.DEFAULT_FIELDS, idle_seconds=config.SESSION_IDLE_SECONDS,
                 max_sessions=config.MAX_OPEN_SESSIONS, clock=time.monotonic):
        self.fields = {}
        self.labels = {}
        self.sessions = {}
        self.session_fields = {}
        self.last_used = {}
        self.idle_seconds = idle_seconds
        self.max_sessions = max_sessions
        self.clock = clock
        # One lock for fields and sessions; Flask and the GUI share this object
        self.lock = threading.Lock()
        for name, label, decimal_places in fields:
            self.add_field(name, label, decimal_places)

    # ── Fields ────────────────────────────────────────────────────────────
    def add_field(self, name, label=None, decimal_places=config.DEFAULT_DECIMAL_PLACES, value=0.0):
        field = CalculatorTextField(name, value, decimal_places)
        self.fields[name] = field
        self.labels[name] = label or name
        return field

    def get_field(self, name):
        """Get a field by name (KeyError if unknown)"""
        return self.fields[name]

    def set_field_value(self, name, value):
        """Set a field directly; values must be finite and not negative"""
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Field values must be a finite number >= 0, got {value!r}")
        with self.lock:
            field = self.get_field(name)
            field.set_value(value)
            return field

    def submit_field_text(self, name, text):
        with self.lock:
            field = self.get_field(name)
            return field.submit(text), field

    def field_to_dict(self, field):
        return {
            'name': field.name,
            'label': self.labels.get(field.name, field.name),
            'value': field.value,
            'text': field.text,
            'decimal_places': field.decimal_places,
        }

    def get_field_list(self):
        return [self.field_to_dict(field) for field in self.fields.values()]

    # ── Sessions ──────────────────────────────────────────────────────────
    def open_session(self, field_name, decimal_places=None):
        """Open a calculator session on a field and return its id"""
        with self.lock:
            field = self.get_field(field_name)
            self._expire_idle()
            while self.sessions and len(self.sessions) >= self.max_sessions:
                oldest = min(self.last_used, key=self.last_used.get)
                logger.warning("Too many open sessions, cancelling %s", oldest)
                self._drop(oldest)

            if decimal_places is None:
                session = field.open_calculator()
            else:
                session = CalculatorSession(field.value, decimal_places, sink=field.set_value)
            session_id = uuid.uuid4().hex
            self.sessions[session_id] = session
            self.session_fields[session_id] = field_name
            self.last_used[session_id] = self.clock()
            logger.info("Opened session %s on field %s", session_id, field_name)
            return session_id

    def get_session(self, session_id):
        """Get a session by id (KeyError if unknown)"""
        return self.sessions[session_id]

    def _use(self, session_id):
        """Look up a session for an action and mark it as recently used"""
        session = self.get_session(session_id)
        self.last_used[session_id] = self.clock()
        return session

    def press_keys(self, session_id, keys):
        """Apply key presses in order; unknown keys reject the whole batch"""
        actions = [Action.from_key(key) for key in keys]
        with self.lock:
            session = self._use(session_id)
            for action in actions:
                session.dispatch(action)
            return self.session_to_dict(session_id, session)

    def finish_session(self, session_id):
        """Commit a session (Done) and drop it from the registry"""
        with self.lock:
            session = self._use(session_id)
            session.done()
            data = self.session_to_dict(session_id, session)
            self._discard(session_id)
            return data

    def cancel_session(self, session_id):
        with self.lock:
            session = self._use(session_id)
            session.cancel()
            data = self.session_to_dict(session_id, session)
            self._discard(session_id)
            return data

    def expire_idle(self):
        """Cancel sessions nobody has touched for idle_seconds; returns their ids"""
        with self.lock:
            return self._expire_idle()

    def _expire_idle(self):
        cutoff = self.clock() - self.idle_seconds
        expired = [session_id for session_id, used in self.last_used.items() if used <= cutoff]
        for session_id in expired:
            logger.info("Session %s idle too long", session_id)
            self._drop(session_id)
        return expired

    def session_to_dict(self, session_id, session):
        data = session.to_dict()
        data['id'] = session_id
        data['field'] = self.session_fields.get(session_id)
        return data

    def _drop(self, session_id):
        """Cancel an abandoned session; its field keeps the value it had"""
        self.sessions[session_id].cancel()
        self._discard(session_id)

    def _discard(self, session_id):
        self.sessions.pop(session_id, None)
        self.session_fields.pop(session_id, None)
        self.last_used.pop(session_id, None)
        logger.info("Closed session %s", session_id)
