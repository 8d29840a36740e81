"""
Run Signup Window Jobs
Runs the weekly window scheduling or the open-due check once and exits.
Meant for an external cron (e.g. Sunday 00:00 for "schedule", every minute
for "open-due") when the in-process scheduler is disabled.
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.database.supabase_client import get_supabase
from app.modules.push.expo_client import ExpoPushClient
from app.modules.signup_windows.service import SignupWindowService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Bed sign-up window jobs")
    parser.add_argument("job", choices=["schedule", "open-due"])
    args = parser.parse_args(argv)

    try:
        service = SignupWindowService(get_supabase(), ExpoPushClient())
        if args.job == "schedule":
            result = service.schedule_weekly_windows()
        else:
            result = service.open_due_windows()
        logger.info(f"Result: {result.model_dump(mode='json', exclude_none=True)}")
        if result.errors:
            sys.exit(2)
    except Exception as e:
        logger.error(f"Error running {args.job}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
