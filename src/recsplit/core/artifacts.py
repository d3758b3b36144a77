from datetime import datetime, timezone
import uuid


def new_run_id() -> str:
    return f"{datetime.now(timezone.utc).strftime('%Y-%m-%d_%H%M%S')}_{uuid.uuid4().hex[:4]}"
