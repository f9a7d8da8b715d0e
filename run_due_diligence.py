import httpx
import time
import sys

API_BASE = "http://localhost:8000/api/v1"
SUBJECT_NAME = "Acme Regional Holdings"

def run_due_diligence(subject_name: str = SUBJECT_NAME):
    print(f"Starting due diligence for {subject_name}...")
    try:
        # Start run
        resp = httpx.post(
            f"{API_BASE}/due-diligence",
            json={"subject_name": subject_name, "subject_type": "organization"},
            timeout=30.0,
        )
        resp.raise_for_status()
        run_id = resp.json()["run_id"]
        print(f"Run started. Run ID: {run_id}")

        # Poll
        while True:
            status_resp = httpx.get(f"{API_BASE}/due-diligence/{run_id}", timeout=10.0)
            status_resp.raise_for_status()
            report = status_resp.json()
            running = [c["id"] for c in report["checks"] if c["status"] == "running"]
            print(f"Status: {report['status']} | overall risk: {report['overall_risk']} | running: {running}")

            if report["status"] in ("completed", "cancelled"):
                break
            elif report["status"] == "failed":
                print(f"Due diligence failed: {report.get('error')}")
                return

            time.sleep(1)

        for check in report["checks"]:
            outcome = check["result"] or check["status"]
            print(f"  {check['id']:<22} {outcome:<13} {check['risk_level'] or '-':<7} {check['details'] or ''}")
        print(f"Overall risk: {report['overall_risk'].upper()}")

    except httpx.HTTPError as e:
        print(f"Error: {e}")

if __name__ == "__main__":
    run_due_diligence(sys.argv[1] if len(sys.argv) > 1 else SUBJECT_NAME)
