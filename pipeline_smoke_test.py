#!/usr/bin/env python3
"""
Discharge pipeline smoke test against a running server.

Walks one admitted patient through all four stages, then replays the
common mistakes (wrong role, double billing, release before payment) and
reports every status code that differs from the expected one.

    python pipeline_smoke_test.py --patient 1 --admission 1 --bed 1

The patient must be on an active admission; the run consumes it.
"""
import argparse
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import requests

BASE_URL = "http://127.0.0.1:8000"

STAFF = {
    "doctor": {"X-Staff-Id": "1001", "X-Staff-Role": "doctor", "X-Staff-Name": "Smoke Doctor"},
    "admin": {"X-Staff-Id": "2001", "X-Staff-Role": "admin", "X-Staff-Name": "Smoke Admin"},
    "nurse": {"X-Staff-Id": "3001", "X-Staff-Role": "nurse"},
}


@dataclass
class StepResult:
    success: bool
    endpoint: str
    method: str
    status_code: int
    response_time: float
    error_message: str = ""
    description: str = ""
    staff_role: str = ""


class PipelineSmokeTester:
    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.results: List[StepResult] = []

    @property
    def errors(self) -> List[StepResult]:
        return [r for r in self.results if not r.success]

    def call(self, role: Optional[str], method: str, endpoint: str, data: Dict = None,
             expected_status: int = 200, description: str = "") -> Optional[dict]:
        """Send one request as ``role`` and record whether the status matched."""
        url = f"{self.base_url}{endpoint}"
        headers = dict(STAFF.get(role, {}))
        start_time = time.time()
        try:
            response = self.session.request(method, url, json=data, headers=headers, timeout=10)
        except requests.RequestException as e:
            self.results.append(StepResult(
                success=False, endpoint=endpoint, method=method, status_code=0,
                response_time=time.time() - start_time, error_message=str(e),
                description=description, staff_role=role or "",
            ))
            print(f"❌ {method} {endpoint} - exception: {e}")
            return None

        response_time = time.time() - start_time
        ok = response.status_code == expected_status
        self.results.append(StepResult(
            success=ok, endpoint=endpoint, method=method, status_code=response.status_code,
            response_time=response_time, error_message="" if ok else response.text[:200],
            description=description, staff_role=role or "",
        ))
        if ok:
            print(f"✅ {method} {endpoint} [{role or 'anonymous'}] {description} ({response_time:.2f}s)")
        else:
            print(f"❌ {method} {endpoint} [{role or 'anonymous'}] {description}: "
                  f"{response.status_code}, expected {expected_status}")
        try:
            return response.json()
        except ValueError:
            return None

    def run(self, patient_id: int, admission_id: int, bed_id: int) -> bool:
        self.call(None, "GET", "/healthz", description="health check")
        self.call(None, "POST", "/api/discharge/initiate", {}, 401, "no staff headers")
        self.call("nurse", "POST", "/api/discharge/initiate",
                  {"patientId": patient_id, "admissionId": admission_id, "dischargeNotes": "smoke"},
                  403, "nurse may not discharge")

        body = self.call("doctor", "POST", "/api/discharge/initiate",
                         {"patientId": patient_id, "admissionId": admission_id, "dischargeNotes": "smoke run"},
                         201, "medical discharge")
        if not body or not body.get("ok"):
            print("cannot continue without a discharge record")
            return False
        discharge_id = body["data"]["id"]

        body = self.call("admin", "POST", "/api/discharge/billing",
                         {"dischargeId": discharge_id, "subtotal": 1000, "discountPercentage": 10},
                         201, "billing")
        self.call("admin", "POST", "/api/discharge/billing",
                  {"dischargeId": discharge_id, "subtotal": 1000}, 409, "billing twice")
        self.call("admin", "POST", "/api/discharge/bed-release",
                  {"dischargeId": discharge_id, "bedId": bed_id}, 409, "release before payment")
        if body and body.get("ok"):
            billing = body["data"]
            self.call("admin", "POST", "/api/discharge/payment",
                      {"billingId": billing["id"], "paymentAmount": billing["totalAmount"] + 1,
                       "paymentMethod": "card"}, 400, "overpayment")
            self.call("admin", "POST", "/api/discharge/payment",
                      {"billingId": billing["id"], "paymentAmount": billing["totalAmount"],
                       "paymentMethod": "card"}, 201, "payment")

        self.call("admin", "POST", "/api/discharge/bed-release",
                  {"dischargeId": discharge_id, "bedId": bed_id}, 201, "bed release")
        self.call("doctor", "GET", f"/api/discharge/{discharge_id}", description="case summary")
        self.call("admin", "GET", f"/api/discharge/{discharge_id}/audit", description="audit trail")
        self.call("nurse", "GET", "/api/beds?status=available", description="available beds")
        return not self.errors

    def report(self):
        total = len(self.results)
        failed = len(self.errors)
        print(f"\n{total - failed}/{total} steps passed")
        for r in self.errors:
            print(f"  - {r.method} {r.endpoint} [{r.staff_role}] {r.description}: "
                  f"{r.status_code} {r.error_message}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--base-url", default=BASE_URL)
    parser.add_argument("--patient", type=int, required=True)
    parser.add_argument("--admission", type=int, required=True)
    parser.add_argument("--bed", type=int, required=True)
    args = parser.parse_args(argv)

    tester = PipelineSmokeTester(args.base_url)
    ok = tester.run(args.patient, args.admission, args.bed)
    tester.report()
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
