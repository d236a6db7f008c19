"""Constants for the SchoolHub client."""

DOMAIN = "schoolhub"

# Backend
DEFAULT_API_URL = "http://localhost:4003/api"
DEFAULT_REQUEST_TIMEOUT = 30  # seconds
DEFAULT_QUERY_STALE_SECONDS = 30.0

AUTH_LOGIN_PATH = "/auth/login"
AUTH_REGISTER_PATH = "/auth/register"
AUTH_REFRESH_PATH = "/auth/refresh"

# Session storage keys (same names the browser build kept in local storage)
STORAGE_ACCESS_TOKEN = "access_token"
STORAGE_REFRESH_TOKEN = "refresh_token"
STORAGE_USER = "user"
SESSION_KEYS = (STORAGE_ACCESS_TOKEN, STORAGE_REFRESH_TOKEN, STORAGE_USER)
DEFAULT_SESSION_FILE = "~/.schoolhub/session.json"

# Environment configuration
CONF_API_URL = "SCHOOLHUB_API_URL"
CONF_SESSION_FILE = "SCHOOLHUB_SESSION_FILE"
CONF_LOG_LEVEL = "SCHOOLHUB_LOG_LEVEL"
CONF_REQUEST_TIMEOUT = "SCHOOLHUB_REQUEST_TIMEOUT"
CONF_QUERY_STALE_SECONDS = "SCHOOLHUB_QUERY_STALE_SECONDS"
CONF_EMAIL = "SCHOOLHUB_EMAIL"
CONF_PASSWORD = "SCHOOLHUB_PASSWORD"

# Roles
ROLE_SUPER_ADMIN = "super_admin"
ROLE_SCHOOL_ADMIN = "school_admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
ROLE_PARENT = "parent"
ALL_ROLES = (ROLE_SUPER_ADMIN, ROLE_SCHOOL_ADMIN, ROLE_TEACHER, ROLE_STUDENT, ROLE_PARENT)
ADMIN_ROLES = (ROLE_SUPER_ADMIN, ROLE_SCHOOL_ADMIN)

# Both admin kinds live in the backend's administrator table
BACKEND_ACCOUNT_TYPES = {
	ROLE_SUPER_ADMIN: "administrator",
	ROLE_SCHOOL_ADMIN: "administrator",
}

# Navigation
PATH_AUTH = "/auth"
PATH_LOGIN = "/login"
PATH_DASHBOARD = "/dashboard"

# Messages
MSG_NETWORK_ERROR = "Network error. Please check your connection."
MSG_GENERIC_ERROR = "An error occurred. Please try again."
MSG_INVALID_CREDENTIALS = "Invalid credentials. Please check your email and password."
MSG_INVALID_LOGIN_RESPONSE = "Invalid response from server. Please try again."
MSG_LOGIN_FAILED = "Login failed. Please check your credentials."
MSG_LOGIN_SUCCESS = "Login successful!"
MSG_LOGOUT_SUCCESS = "Logged out successfully"
MSG_SESSION_EXPIRED = "Your session has expired. Please log in again."

# Backend error codes with a friendlier wording
ERROR_CODE_MESSAGES = {
	"invalid_credentials": "Invalid email or password. Please try again.",
	"user_not_found": "User not found. Please check your credentials.",
	"email_exists": "An account with this email already exists.",
	"weak_password": "Password is too weak. Please use a stronger password.",
	"unauthorized": "You are not authorized to perform this action.",
	"forbidden": "Access forbidden. You do not have permission.",
	"not_found": "The requested resource was not found.",
	"validation_error": "Please check your input and try again.",
}

STATUS_MESSAGES = {
	400: "Invalid request. Please check your input.",
	401: "Authentication failed. Please log in again.",
	403: "You do not have permission to perform this action.",
	404: "The requested resource was not found.",
	409: "This resource already exists.",
	422: "Validation failed. Please check your input.",
	429: "Too many requests. Please try again later.",
	500: "Server error. Please try again later.",
	502: "Server is temporarily unavailable. Please try again later.",
	503: "Service unavailable. Please try again later.",
}

# Submission states counted as done
COMPLETED_SUBMISSION_STATUSES = ("submitted", "graded")
PASS_PERCENTAGE = 50.0

# Learning material type labels shown in forms -> backend material_type
MATERIAL_TYPE_MAP = {
	"PDF": "pdf",
	"Video": "video",
	"Document": "doc",
	"Link": "link",
	"Image": "image",
	"Other": "other",
}
UPLOAD_BUCKET = "syllabi"
UPLOAD_FOLDER_RESOURCES = "learning-resources"
UPLOAD_FOLDER_SYLLABI = "course-outlines"
SYLLABUS_MAX_BYTES = 10 * 1024 * 1024

NOTIFICATION_HISTORY = 50
