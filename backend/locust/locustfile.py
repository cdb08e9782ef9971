"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags review      # Competing admin reviews
  locust -f locustfile.py --tags throughput  # Catalog reads
  locust -f locustfile.py --tags throttle    # Sign-in rate limiting
  locust -f locustfile.py --tags edge        # Bad input
  locust -f locustfile.py                    # All tests

The review scenario needs an admin seeded through ADMIN_EMAIL / ADMIN_PASSWORD;
export the same values as LOAD_ADMIN_EMAIL / LOAD_ADMIN_PASSWORD.
"""

import os
import random
import string
from locust import HttpUser, task, between, tag, events
from datetime import date, timedelta

# Shared state
EVENT_IDS = []
PENDING_IDS = []

ADMIN_EMAIL = os.getenv("LOAD_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("LOAD_ADMIN_PASSWORD", "adminpassword")
CATEGORIES = ["cultural", "music", "sports", "culinary", "adventure", "business", "other"]


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 999)}@test.com"


def random_name():
    return "Load " + "".join(random.choices(string.ascii_lowercase, k=8)).title()


def event_payload():
    return {
        "title": f"Event {random.randint(1, 10000)}",
        "description": "Load test event",
        "date": (date.today() + timedelta(days=random.randint(1, 90))).isoformat(),
        "time": "19:30",
        "location": "Venue",
        "category": random.choice(CATEGORIES),
        "tickets": [{"name": "General Admission", "price": 25, "quantity": random.randint(10, 500)}],
    }


def organizer_headers(client):
    resp = client.post("/api/auth/organizer/signup", json={
        "name": random_name(),
        "email": random_email(),
        "password": "loadtest123",
        "company": "Load Test Events",
    })
    if resp.status_code == 201:
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return {}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Load test against {environment.host}")
    print("=" * 60)


class ReviewRaceUser(HttpUser):
    """
    TEST 1: Competing reviews - many admin sessions, one shared queue

    Run: locust -f locustfile.py --tags review -u 50 -r 25 --run-time 30s

    Every pending event must be reviewed exactly once: one 200, the rest 409.
    After the test, verify:
      SELECT approval_status, COUNT(*) FROM events GROUP BY approval_status;
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.organizer = organizer_headers(self.client)
        resp = self.client.post("/api/auth/signin", json={
            "email": ADMIN_EMAIL,
            "password": ADMIN_PASSWORD,
        })
        if resp.status_code == 200:
            self.admin = {"Authorization": f"Bearer {resp.json()['token']}"}
        else:
            self.admin = {}

    @tag("review")
    @task(1)
    def submit_event(self):
        if not self.organizer:
            return
        resp = self.client.post("/api/public/events", json=event_payload(), headers=self.organizer)
        if resp.status_code == 201:
            PENDING_IDS.append(resp.json()["event"]["id"])

    @tag("review")
    @task(5)
    def review_pending(self):
        """All admins race for the same pending event."""
        if not PENDING_IDS or not self.admin:
            return
        event_id = PENDING_IDS[0]
        with self.client.put(f"/api/admin/events/{event_id}/review",
            json={"approvalStatus": random.choice(["approved", "rejected"]), "adminFeedback": "Load test"},
            headers=self.admin,
            name="/api/admin/events/{id}/review",
            catch_response=True
        ) as resp:
            if resp.status_code == 200:
                resp.success()
                if event_id in PENDING_IDS:
                    PENDING_IDS.remove(event_id)
            elif resp.status_code == 409:
                resp.success()  # Expected: someone else reviewed it first
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - public catalog reads

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events(self):
        resp = self.client.get("/api/events")
        if resp.status_code == 200:
            for event in resp.json().get("data", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}", name="/api/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class ThrottleUser(HttpUser):
    """
    TEST 3: Sign-in throttling

    Run: locust -f locustfile.py --tags throttle -u 10 -r 10 --run-time 30s

    Wrong passwords get 401 until the window fills, then 429 with Retry-After.
    With Redis down the limiter fails open and every attempt gets 401.
    """
    wait_time = between(0, 0.2)

    @tag("throttle")
    @task
    def wrong_password(self):
        with self.client.post("/api/auth/signin",
            json={"email": "victim@test.com", "password": "wrong-password"},
            catch_response=True
        ) as resp:
            if resp.status_code == 401:
                resp.success()
            elif resp.status_code == 429 and resp.headers.get("Retry-After"):
                resp.success()
            else:
                resp.failure(f"Expected 401/429, got {resp.status_code}")


class EdgeCaseUser(HttpUser):
    """
    TEST 4: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = organizer_headers(self.client)

    def expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.get("/api/events/999999", name="/api/events/{id}", catch_response=True) as resp:
            self.expect(resp, [404])

    @tag("edge")
    @task
    def no_tickets(self):
        payload = event_payload()
        payload["tickets"] = []
        with self.client.post("/api/public/events", json=payload, headers=self.headers,
                              catch_response=True) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def bad_category(self):
        payload = event_payload()
        payload["category"] = "opera"
        with self.client.post("/api/public/events", json=payload, headers=self.headers,
                              catch_response=True) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/public/events", data="not json at all", headers=self.headers,
                              catch_response=True) as resp:
            self.expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/public/events", json=event_payload(), catch_response=True) as resp:
            self.expect(resp, [401])

    @tag("edge")
    @task
    def admin_route_as_organizer(self):
        with self.client.get("/api/admin/events/pending", headers=self.headers, catch_response=True) as resp:
            self.expect(resp, [403])


class RealisticUser(HttpUser):
    """
    TEST 5: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some organizer dashboards
      - Rare submissions
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = organizer_headers(self.client)

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/events")
        if resp.status_code == 200:
            for event in resp.json().get("data", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/events/{random.choice(EVENT_IDS)}", name="/api/events/{id}")

    @task(10)
    def organizer_dashboard(self):
        if self.headers:
            self.client.get("/api/organizer/events", headers=self.headers)

    @task(3)
    def submit_event(self):
        if self.headers:
            self.client.post("/api/public/events", json=event_payload(), headers=self.headers)
