
import asyncio
import os
import sys

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "backend")))

from diligence.services.due_diligence_runner import DueDiligenceRunner
from diligence.services.verification.providers import MockOutcomeProvider

async def main():
    subject = "Sample Partner"
    print(f"Running due diligence for {subject}...")

    runner = DueDiligenceRunner(provider=MockOutcomeProvider(min_delay=0.1, max_delay=0.3))

    def on_complete(states):
        print(f"Completion callback received {len(states)} checks")

    try:
        report = await runner.run(subject, run_id="debug-run-123", on_complete=on_complete)

        print(f"Status: {report.status}")
        if report.error:
            print(f"Error: {report.error}")

        print(f"Overall risk: {report.overall_risk}")
        print(report.summary)

        for check in report.checks:
            print(f"  {check.id}: {check.status} {check.result} {check.risk_level}")

    except Exception as e:
        print(f"Exception during run: {e}")
        import traceback
        traceback.print_exc()

if __name__ == "__main__":
    asyncio.run(main())
