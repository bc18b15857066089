import os

APP_NAME = "ProspectFlow API"
APP_VERSION = "1.0.0"

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./prospectflow.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ Frontend / CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", f"{FRONTEND_URL},http://127.0.0.1:3000").split(",")
    if origin.strip()
]

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "INR")

# ✅ Invoice issuer
INVOICE_COMPANY_NAME = os.getenv("INVOICE_COMPANY_NAME", "ProspectFlow Inc.")
INVOICE_COMPANY_ADDRESS = os.getenv("INVOICE_COMPANY_ADDRESS", "123 Innovation Drive, Tech City, ST 54321")
INVOICE_COMPANY_CONTACT = os.getenv("INVOICE_COMPANY_CONTACT", "contact@prospectflow.com | (555) 123-4567")
