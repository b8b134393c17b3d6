"""
HTTP routers, one per API area.
"""
from . import assistant, auth, cases, diagnosis, directory, doctor_requests, files, patients

ROUTERS = [
    auth.router,
    directory.router,
    patients.router,
    doctor_requests.router,
    diagnosis.router,
    files.router,
    cases.router,
    assistant.router,
]

__all__ = ["ROUTERS"]
