"""Static tables that drive feature classification and phase assembly."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class ComplexPattern:
    """Keyword row for features that are complex enough to isolate."""

    patterns: Tuple[str, ...]
    domain: str
    base_token_estimate: int
    requires_own_phase: bool
    suggested_name: str


@dataclass(frozen=True)
class ModeratePattern:
    patterns: Tuple[str, ...]
    domain: str
    base_token_estimate: int


@dataclass(frozen=True)
class ImplicitFeature:
    """One row of the technical-flag table.

    ``flag`` names the ``TechnicalRequirements`` attribute that enables the
    row. ``description`` may reference ``{auth_type}`` and ``{languages}``.
    """

    flag: str
    feature_id: str
    name: str
    description: str
    domain: str
    complexity: str
    estimated_tokens: int
    requires_own_phase: bool
    suggested_phase_name: str
    keywords: Tuple[str, ...]
    priority: str = "medium"
    needs_database_dependency: bool = False


COMPLEX_PATTERNS: Tuple[ComplexPattern, ...] = (
    ComplexPattern(
        ("auth", "authentication", "login", "signup", "sign up", "sign-up", "register",
         "oauth", "sso", "jwt", "session"),
        "auth", 4000, True, "Authentication System",
    ),
    ComplexPattern(
        ("database", "schema", "migration", "orm", "prisma", "supabase", "postgres",
         "mysql", "mongodb"),
        "database", 3500, True, "Database Setup",
    ),
    ComplexPattern(
        ("payment", "stripe", "paypal", "checkout", "billing", "subscription", "invoice"),
        "integration", 4500, True, "Payment Integration",
    ),
    ComplexPattern(
        ("real-time", "realtime", "websocket", "socket", "live", "sync", "presence",
         "collaborative"),
        "real-time", 4000, True, "Real-time Features",
    ),
    ComplexPattern(
        ("file upload", "image upload", "storage", "media", "s3", "cloudinary", "upload"),
        "storage", 3500, True, "File Storage",
    ),
    ComplexPattern(
        ("push notification", "fcm", "firebase notification", "email notification", "sms"),
        "notification", 3000, True, "Notification System",
    ),
    ComplexPattern(
        ("offline", "service worker", "pwa", "local storage", "indexeddb", "sync queue"),
        "offline", 3500, True, "Offline Support",
    ),
    ComplexPattern(
        ("search", "elasticsearch", "algolia", "full-text", "autocomplete"),
        "search", 3000, True, "Search System",
    ),
    ComplexPattern(
        ("analytics", "dashboard", "charts", "graphs", "reporting", "metrics"),
        "analytics", 3500, True, "Analytics Dashboard",
    ),
    ComplexPattern(
        ("admin panel", "admin dashboard", "moderation", "user management", "cms"),
        "admin", 4000, True, "Admin Panel",
    ),
)

MODERATE_PATTERNS: Tuple[ModeratePattern, ...] = (
    ModeratePattern(("form", "multi-step", "wizard", "validation"), "ui-component", 2000),
    ModeratePattern(("table", "data grid", "pagination", "sorting"), "ui-component", 2200),
    ModeratePattern(("drag", "drop", "sortable", "reorder"), "ui-component", 2500),
    ModeratePattern(("calendar", "date picker", "scheduling"), "feature", 2000),
    ModeratePattern(("map", "location", "geolocation"), "integration", 2500),
    ModeratePattern(("export", "pdf", "csv", "download"), "feature", 1800),
    ModeratePattern(("import", "bulk", "batch"), "feature", 2000),
    ModeratePattern(("filter", "advanced filter", "faceted"), "feature", 1800),
    ModeratePattern(("comment", "reply", "thread"), "feature", 2200),
    ModeratePattern(("rating", "review", "feedback"), "feature", 1500),
)

IMPLICIT_FEATURES: Tuple[ImplicitFeature, ...] = (
    ImplicitFeature(
        flag="needs_auth",
        feature_id="implicit-auth",
        priority="high",
        name="Authentication System",
        description="{auth_type} authentication with login, logout, and session management",
        domain="auth",
        complexity="complex",
        estimated_tokens=4000,
        requires_own_phase=True,
        suggested_phase_name="Authentication System",
        keywords=("auth",),
        needs_database_dependency=True,
    ),
    ImplicitFeature(
        flag="needs_database",
        feature_id="implicit-database",
        priority="high",
        name="Database Setup",
        description="Database schema, configuration, and data models",
        domain="database",
        complexity="complex",
        estimated_tokens=3500,
        requires_own_phase=True,
        suggested_phase_name="Database Schema",
        keywords=("database", "schema"),
    ),
    ImplicitFeature(
        flag="needs_realtime",
        feature_id="implicit-realtime",
        name="Real-time Updates",
        description="WebSocket connections for live data synchronization",
        domain="real-time",
        complexity="complex",
        estimated_tokens=4000,
        requires_own_phase=True,
        suggested_phase_name="Real-time Features",
        keywords=("realtime", "websocket"),
        needs_database_dependency=True,
    ),
    ImplicitFeature(
        flag="needs_file_upload",
        feature_id="implicit-storage",
        name="File Storage",
        description="File upload, storage, and media handling",
        domain="storage",
        complexity="complex",
        estimated_tokens=3500,
        requires_own_phase=True,
        suggested_phase_name="File Storage",
        keywords=("upload", "storage"),
    ),
    ImplicitFeature(
        flag="needs_api",
        feature_id="implicit-api",
        name="API Integration",
        description="External API connections and service integration",
        domain="integration",
        complexity="moderate",
        estimated_tokens=2500,
        requires_own_phase=False,
        suggested_phase_name="API Integration",
        keywords=("api", "integration"),
    ),
    ImplicitFeature(
        flag="needs_state_history",
        feature_id="implicit-state-management",
        priority="high",
        name="State Management Infrastructure",
        description=(
            "Store setup with slices, persistence middleware, history tracking, "
            "and undo/redo capabilities"
        ),
        domain="setup",
        complexity="complex",
        estimated_tokens=4000,
        requires_own_phase=True,
        suggested_phase_name="State Management Setup",
        keywords=("state", "store", "persistence", "history", "undo", "redo"),
    ),
    ImplicitFeature(
        flag="needs_context_persistence",
        feature_id="implicit-context-memory",
        priority="high",
        name="Context Memory System",
        description=(
            "Cross-session context persistence, interaction history, "
            "and user preference tracking"
        ),
        domain="storage",
        complexity="complex",
        estimated_tokens=4500,
        requires_own_phase=True,
        suggested_phase_name="Memory & Context System",
        keywords=("memory", "context", "persistence", "history", "preferences"),
        needs_database_dependency=True,
    ),
    ImplicitFeature(
        flag="needs_caching",
        feature_id="implicit-caching",
        name="Caching Infrastructure",
        description=(
            "Performance caching layer with memoization, request deduplication, "
            "and cache invalidation"
        ),
        domain="setup",
        complexity="moderate",
        estimated_tokens=2500,
        requires_own_phase=False,
        suggested_phase_name="Caching Layer",
        keywords=("cache", "memoization", "performance"),
    ),
    ImplicitFeature(
        flag="needs_offline_support",
        feature_id="implicit-offline",
        name="Offline Support",
        description="Service worker setup, local persistence, background sync, and offline-first data flow",
        domain="offline",
        complexity="complex",
        estimated_tokens=4000,
        requires_own_phase=True,
        suggested_phase_name="Offline Support",
        keywords=("offline", "service worker", "sync", "pwa"),
        needs_database_dependency=True,
    ),
    ImplicitFeature(
        flag="needs_i18n",
        feature_id="implicit-i18n",
        priority="high",
        name="Internationalization",
        description="Multi-language support for: {languages}",
        domain="i18n",
        complexity="complex",
        estimated_tokens=4000,
        requires_own_phase=True,
        suggested_phase_name="Internationalization Setup",
        keywords=("i18n", "localization", "translate", "language"),
    ),
)

# Domains walked after setup/database/auth, in emission order.
DOMAIN_PRIORITY: Tuple[str, ...] = (
    "core-entity",
    "feature",
    "ui-component",
    "integration",
    "storage",
    "real-time",
    "notification",
    "search",
    "analytics",
    "admin",
    "ui-role",
    "offline",
)

DOMAIN_LABELS: Dict[str, str] = {
    "setup": "Infrastructure Setup",
    "database": "Database",
    "auth": "Authentication",
    "i18n": "Internationalization",
    "core-entity": "Core Features",
    "feature": "Features",
    "ui-component": "UI Components",
    "integration": "Integrations",
    "real-time": "Real-time",
    "storage": "Storage",
    "notification": "Notifications",
    "offline": "Offline Support",
    "search": "Search",
    "analytics": "Analytics",
    "admin": "Admin",
    "ui-role": "Role Views",
    "testing": "Testing",
    "polish": "Polish",
}

AUTH_DEPENDENT_DOMAINS = frozenset({"admin", "ui-role", "analytics"})

PRIORITY_ORDER: Dict[str, int] = {"high": 0, "medium": 1, "low": 2}
COMPLEXITY_ORDER: Dict[str, int] = {"simple": 0, "moderate": 1, "complex": 2}

SETUP_PHASE_NAME = "Project Setup"
DESIGN_SYSTEM_PHASE_NAME = "Design System Setup"
DATABASE_PHASE_NAME = "Database Schema"
AUTH_PHASE_NAME = "Authentication System"
POLISH_PHASE_NAME = "Polish & Documentation"

# Keyword sets used by the concept-level auto-detection helpers.
STATE_COMPLEXITY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "complex": (
        "undo", "redo", "history", "collaborative", "multi-user", "workflow",
        "state machine", "offline sync", "optimistic",
    ),
    "moderate": (
        "filter", "sort", "cart", "wizard", "multi-step", "draft", "preferences",
        "settings", "favorites",
    ),
}

MEMORY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "context_strong": (
        "remember", "memory", "across sessions", "conversation history", "personalized",
    ),
    "context_weak": ("history", "preferences", "context", "recent", "learn"),
    "state_history": ("undo", "redo", "version history", "revert"),
    "caching": ("cache", "fast", "performance", "offline", "instant", "prefetch"),
}
