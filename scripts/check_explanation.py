"""
Run one telemetry -> route -> explanation cycle with the current .env and
print which explanation path was taken. Useful for checking a Gemini key.

    python scripts/check_explanation.py
"""
import asyncio

from medisense.config import settings
from medisense.main import build_service


async def check_explanation():
    print(f"Gemini credential configured: {settings.has_gemini_credentials}")
    print(f"Model: {settings.gemini_model} (timeout {settings.explanation_timeout_seconds}s)")

    service = build_service(settings)
    status = service.get_status()
    analysis = await service.analyze(status.risk, status.priority, status.accuracy)

    report = analysis.report
    print(f"\nRecommended: {analysis.evaluation.recommended.name}")
    print(f"Explanation path: {report.path.value}"
          + (f" ({report.fallback_reason.value})" if report.fallback_reason else ""))
    print("=" * 50)
    print(report.markdown)
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(check_explanation())
