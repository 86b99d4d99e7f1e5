"""Application-wide constants (cache key prefixes, feature keys, permission codes)."""

CACHE_KEY_SEP = ":"
CACHE_PREFIX_TENANT = "tenant"
CACHE_PREFIX_PERMISSION = "permission"
CACHE_PREFIX_FEATURE = "feature"

# Cached value for "tenant id does not exist" (short-lived negative entry).
TENANT_CACHE_MISS_MARKER = "__missing__"

# Well-known feature flag keys.
FEATURE_ONLINE_ADMISSIONS = "online_admissions"
FEATURE_TRANSPORT_TRACKING = "transport_tracking"
FEATURE_AI_INSIGHTS = "ai_insights"
FEATURE_PARENT_MESSAGING = "parent_messaging"
FEATURE_STUDENT_PORTAL = "student_portal"

# Permission codes (resource:action).
PERM_STUDENTS_CREATE = "students:create"
PERM_STUDENTS_READ = "students:read"
PERM_STUDENTS_UPDATE = "students:update"
PERM_STUDENTS_DELETE = "students:delete"
PERM_ADMISSIONS_CREATE = "admissions:create"
PERM_ADMISSIONS_READ = "admissions:read"
PERM_ADMISSIONS_UPDATE = "admissions:update"
PERM_FEATURE_FLAGS_MANAGE = "feature_flags:manage"

DEFAULT_PERMISSIONS: dict[str, str] = {
    PERM_STUDENTS_CREATE: "Create student records",
    PERM_STUDENTS_READ: "View student records",
    PERM_STUDENTS_UPDATE: "Update student records",
    PERM_STUDENTS_DELETE: "Deactivate student records",
    PERM_ADMISSIONS_CREATE: "Record admission enquiries",
    PERM_ADMISSIONS_READ: "View admission enquiries",
    PERM_ADMISSIONS_UPDATE: "Update admission enquiries",
    PERM_FEATURE_FLAGS_MANAGE: "Manage tenant feature flags",
}

# Roles seeded for every new tenant: code -> (name, permission codes).
DEFAULT_ROLES: dict[str, tuple[str, list[str]]] = {
    "admin": ("Administrator", list(DEFAULT_PERMISSIONS)),
    "teacher": ("Teacher", [PERM_STUDENTS_READ, PERM_ADMISSIONS_READ]),
    "admissions_officer": (
        "Admissions Officer",
        [PERM_ADMISSIONS_CREATE, PERM_ADMISSIONS_READ, PERM_ADMISSIONS_UPDATE, PERM_STUDENTS_READ],
    ),
}

# Global flags created by the seed script: key -> (name, description, default).
DEFAULT_FEATURE_FLAGS: dict[str, tuple[str, str, bool]] = {
    FEATURE_ONLINE_ADMISSIONS: (
        "Online admissions",
        "Admission enquiry pipeline and online application forms",
        False,
    ),
    FEATURE_TRANSPORT_TRACKING: ("Transport tracking", "Live school bus tracking", False),
    FEATURE_AI_INSIGHTS: ("AI insights", "Predicted performance and attendance risk", False),
    FEATURE_PARENT_MESSAGING: ("Parent messaging", "Two-way messaging with guardians", False),
    FEATURE_STUDENT_PORTAL: ("Student portal", "Self-service portal for students", False),
}
