# one JSON record per HTTP request, tagged with the pass-code / link it touched
# never blocks the request, never writes to the DB

import json
import logging
import time
from typing import Any

from fastapi import Request

logger = logging.getLogger("passsync.audit")

# path params worth lifting into the record, wire name → record key
AUDIT_PARAMS = {
    "pass_code": "pass_code",
    "link_id": "link_id",
    "manager_code": "pass_code",
    "candidate_code": "pass_code",
    "slot_id": "slot_id",
    "notification_id": "notification_id",
    "candidate_id": "candidate_id",
}


def audit_record(request: Request, status: int, started: float) -> dict[str, Any]:
    parts = request.url.path.strip("/").split("/")
    record = {
        "ts": int(started),
        "method": request.method,
        "path": request.url.path,
        # /api/<area>/... → slots / settings / notifications / admin
        "area": parts[1] if len(parts) > 1 and parts[0] == "api" else None,
        "status": status,
        "ip": request.headers.get("X-Real-IP") or (request.client.host if request.client else ""),
        "duration_ms": int((time.time() - started) * 1000),
    }

    # filled in by the router while the request ran
    for name, value in (request.scope.get("path_params") or {}).items():
        key = AUDIT_PARAMS.get(name)
        if key:
            record[key] = value
    return record


async def audit_middleware(request: Request, call_next):
    started = time.time()

    response = await call_next(request)

    logger.info(json.dumps(audit_record(request, response.status_code, started), ensure_ascii=False))
    return response
