class AuditEvents:
    # Accounts
    USER_REGISTERED = "user_registered"
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    OTP_REQUESTED = "otp_requested"
    OTP_VERIFIED = "otp_verified"
    OTP_VERIFY_FAILED = "otp_verify_failed"

    # Telegram
    TELEGRAM_USERNAME_UPDATED = "telegram_username_updated"
    TELEGRAM_USERNAME_CONFLICT = "telegram_username_conflict"
    TELEGRAM_SESSION_AUTHENTICATED = "telegram_session_authenticated"
    TELEGRAM_RECORD_CREATED = "telegram_record_created"
    TELEGRAM_RECORD_UPDATED = "telegram_record_updated"

    # Workers
    WORKER_CREATED = "worker_created"
    WORKER_UPDATED = "worker_updated"
    WORKER_DELETED = "worker_deleted"

    # Attendance
    ATTENDANCE_CREATED = "attendance_created"
    ATTENDANCE_UPDATED = "attendance_updated"
    ATTENDANCE_DELETED = "attendance_deleted"
    ATTENDANCE_BULK_CREATED = "attendance_bulk_created"

    # Payments
    WORKER_PAYMENT_CREATED = "worker_payment_created"
    WORKER_PAYMENT_UPDATED = "worker_payment_updated"
    WORKER_PAYMENT_DELETED = "worker_payment_deleted"
    CULTIVATION_PAYMENT_CREATED = "cultivation_payment_created"
    CULTIVATION_PAYMENT_UPDATED = "cultivation_payment_updated"
    CULTIVATION_PAYMENT_DELETED = "cultivation_payment_deleted"

    # Agriculture
    PERSON_CREATED = "person_created"
    PERSON_UPDATED = "person_updated"
    PERSON_DELETED = "person_deleted"
    CULTIVATION_CREATED = "cultivation_created"
    CULTIVATION_UPDATED = "cultivation_updated"
    CULTIVATION_DELETED = "cultivation_deleted"

    # Real estate
    PROPERTY_CREATED = "property_created"
    PROPERTY_UPDATED = "property_updated"
    PROPERTY_DELETED = "property_deleted"

    # Meel
    MEEL_CREATED = "meel_created"
    MEEL_UPDATED = "meel_updated"
    MEEL_DELETED = "meel_deleted"
