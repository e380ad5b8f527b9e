"""
Seed the two demo tenants through the HTTP API.

- xyz (Project A): name, email
- abc (Project B): name, email, phone

Existing tenants/schemas are reported and skipped, so the script can be re-run.
"""
import json
import os
import pathlib
import sys
from typing import Any, Dict, List

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
try:
    from config import API_BASE_URL
except ImportError:
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
import requests


NAME_FIELD = {
    "id": "name",
    "label": "Full Name",
    "type": "text",
    "placeholder": "Enter your full name",
    "validation": {"required": True, "minLength": 2, "maxLength": 50},
    "errorMessage": "Please enter your full name (2-50 characters)",
}

EMAIL_FIELD = {
    "id": "email",
    "label": "Email Address",
    "type": "email",
    "placeholder": "Enter your email",
    "validation": {"required": True},
    "errorMessage": "Please enter a valid email address",
}

PHONE_FIELD = {
    "id": "phone",
    "label": "Phone Number",
    "type": "phone",
    "placeholder": "Enter your phone number",
    "validation": {"required": True},
    "errorMessage": "Please enter a valid phone number (10-15 digits)",
}


def post(path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    url = f"{API_BASE_URL}{path}"
    resp = requests.post(url, json=payload, timeout=30)
    if resp.status_code == 400 and "already exists" in resp.text:
        print(f"⚠️  Skipped {path}: {resp.json().get('message')}")
        return resp.json()
    if resp.status_code >= 400:
        raise RuntimeError(f"POST {url} failed {resp.status_code}: {resp.text}")
    return resp.json()


def seed_tenant(tenant_id: str, name: str, description: str, fields: List[Dict[str, Any]]) -> None:
    tenant = post("/admin/tenants", {"tenantId": tenant_id, "name": name, "description": description})
    print("Tenant:", json.dumps(tenant, indent=2))
    schema = post("/admin/schemas", {"tenantId": tenant_id, "fields": fields})
    print("Schema:", json.dumps(schema, indent=2))


def main() -> None:
    print("Seeding sample data to API:", API_BASE_URL)
    seed_tenant("xyz", "Project A", "First project with basic fields", [NAME_FIELD, EMAIL_FIELD])
    seed_tenant("abc", "Project B", "Second project with extended fields", [NAME_FIELD, EMAIL_FIELD, PHONE_FIELD])
    print("✅ Done")


if __name__ == "__main__":
    main()
