"""
Hand-written stand-ins for the network and the clock.
Injected through constructor arguments, nothing is patched globally.
"""

import requests


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=None):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self.json_error is not None:
            raise self.json_error
        return self.payload


class FakeSession:
    """
    Mimics requests.Session.get.

    `outcomes` maps a url prefix to either a FakeResponse or an exception
    instance to raise. Every call is recorded in order.
    """
    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.calls = []

    def get(self, url, params=None, timeout=None, headers=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout, "headers": headers})
        for prefix, outcome in self.outcomes.items():
            if url.startswith(prefix):
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        raise requests.ConnectionError(f"no fake outcome for {url}")

    def urls(self):
        return [call["url"] for call in self.calls]


class FakeTimer:
    """Mimics threading.Timer; fires only when the test says so."""
    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.fired = True
            self.function(*self.args, **self.kwargs)


class TimerFactory:
    """Collects every FakeTimer the code under test creates."""
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args=args, kwargs=kwargs)
        self.timers.append(timer)
        return timer

    @property
    def live(self):
        return [timer for timer in self.timers if timer.started and not timer.cancelled and not timer.fired]


def osrm_route_payload(lonlat_coordinates, distance=1234.5, duration=98.7):
    """Minimal OSRM /route answer with a geojson geometry."""
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": distance,
                "duration": duration,
                "geometry": {"type": "LineString", "coordinates": lonlat_coordinates},
                "legs": [{"distance": distance, "duration": duration}],
            }
        ],
    }
