"""Keyword tables for transcript retrieval, keyed by phase domain."""

from __future__ import annotations

from typing import Dict, List

PHASE_KEYWORDS: Dict[str, List[str]] = {
    "setup": ["setup", "structure", "layout", "theme", "style", "color", "navigation", "routing", "state", "cache"],
    "database": ["database", "schema", "table", "model", "field", "relation", "query", "migration", "store", "data"],
    "auth": ["auth", "login", "logout", "signup", "sign up", "register", "password", "session", "role", "permission"],
    "i18n": ["language", "translation", "translate", "locale", "i18n", "localization", "rtl"],
    "core-entity": ["entity", "create", "edit", "delete", "list", "detail", "record", "item"],
    "feature": ["feature", "user can", "users can", "should", "must", "allow", "ability"],
    "ui-component": ["form", "table", "modal", "button", "component", "drag", "grid", "wizard", "layout", "ui"],
    "integration": ["api", "integration", "payment", "stripe", "webhook", "third-party", "external", "map"],
    "real-time": ["real-time", "realtime", "live", "websocket", "sync", "presence", "collaborative", "instant"],
    "storage": ["upload", "file", "image", "photo", "media", "storage", "attachment", "document"],
    "notification": ["notification", "notify", "email", "sms", "push", "alert", "reminder"],
    "offline": ["offline", "sync", "service worker", "pwa", "cache", "connectivity"],
    "search": ["search", "filter", "query", "autocomplete", "find", "results"],
    "analytics": ["analytics", "dashboard", "chart", "graph", "report", "metric", "statistics"],
    "admin": ["admin", "moderation", "manage", "management", "cms", "settings", "permission"],
    "ui-role": ["role", "view", "dashboard", "permission", "access"],
    "testing": ["test", "testing", "qa", "coverage"],
    "polish": ["animation", "loading", "empty state", "error", "polish", "documentation", "readme", "accessibility"],
}
