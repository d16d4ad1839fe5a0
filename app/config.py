from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):

    # Application
    APP_NAME: str = "Cake Order API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Public URLs used in outgoing emails
    DOMAIN_URL: str = "http://localhost:3000"
    API_BASE_URL: str = "http://localhost:8000"

    # Database (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "cake_order"

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    SESSION_COOKIE_NAME: str = "sign_in"
    SESSION_TOKEN_EXPIRE_DAYS: int = 30
    EMAIL_VERIFY_TOKEN_SECRET_KEY: str = "your-email-verify-secret-change-in-production"
    EMAIL_VERIFY_TOKEN_EXPIRE_MINUTES: int = 60
    RESET_PASSWORD_EXPIRE_MINUTES: int = 20
    MIN_PASSWORD_LENGTH: int = 4

    # Payments (Razorpay)
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    PAYMENT_CURRENCY: str = "INR"
    PAYMENT_TIMEOUT_SECONDS: float = 30.0

    # Email (Resend)
    RESEND_API_KEY: str = ""
    MAIL_FROM: str = "Cake Order <no-reply@cakeorder.shop>"

    # Profile photo storage (S3 compatible)
    S3_BUCKET_NAME: str = "cake-order-media"
    S3_REGION: str = "us-east-1"
    S3_ENDPOINT_URL: Optional[str] = None
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None
    S3_PUBLIC_BASE_URL: Optional[str] = None
    S3_KEY_PREFIX: str = "cake_order"

    # Celery
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CELERY_DEFAULT_QUEUE: str = "cake_order.default"
    CELERY_TASK_ALWAYS_EAGER: bool = False
    CELERY_TASK_SOFT_TIME_LIMIT: int = 60
    CELERY_TASK_TIME_LIMIT: int = 120

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
