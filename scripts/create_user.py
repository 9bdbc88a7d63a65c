"""Create a CMS user from the command line"""

import argparse
import getpass
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from cms.context import build_context
from cms.models.user import ROLES
from cms.utils.config import load_settings
from cms.utils.exceptions import CMSError
from cms.utils.logger import setup_logger


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Ledger1 CMS user")
    parser.add_argument("username")
    parser.add_argument("--role", choices=ROLES, default="editor")
    parser.add_argument("--password", help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    try:
        settings = load_settings()
        setup_logger(log_level=settings.logging.level, log_format="console")
        cms = build_context(settings)
        cms.store.initialize()
        user = cms.credentials.create_user(args.username, password, args.role)
    except CMSError as e:
        print(f"[FAIL] {e}")
        return 1

    print(f"[OK] Created {user.role} '{user.username}' ({user.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
