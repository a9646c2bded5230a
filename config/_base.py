import os

HR201_DB_CONFIG = {
    "host": os.getenv("HR201_DB_HOST", "localhost"),
    "port": int(os.getenv("HR201_DB_PORT", "3306")),
    "user": os.getenv("HR201_DB_USER", "root"),
    "password": os.getenv("HR201_DB_PASSWORD", ""),
    "database": os.getenv("HR201_DB_NAME", "hr201"),
}

DTR_DB_CONFIG = {
    "server": os.getenv("DTR_DB_SERVER", "localhost"),
    "port": int(os.getenv("DTR_DB_PORT", "1433")),
    "user": os.getenv("DTR_DB_USER", "sa"),
    "password": os.getenv("DTR_DB_PASSWORD", ""),
    "database": os.getenv("DTR_DB_NAME", "DTR"),
    "driver": os.getenv("DTR_DB_DRIVER", "ODBC Driver 18 for SQL Server"),
    "encrypt": bool(int(os.getenv("DTR_DB_ENCRYPT", "0"))),
}

MEDIA_ROOT = os.getenv("MEDIA_ROOT", os.path.join(os.getcwd(), "media"))

# DigitalPersona capture helper (prints one JSON object on stdout)
BIOMETRIC_HELPER = os.getenv("BIOMETRIC_HELPER", "FingerprintHelper.exe")
BIOMETRIC_HELPER_TIMEOUT = int(os.getenv("BIOMETRIC_HELPER_TIMEOUT", "120"))

# ZKTeco terminals, seconds per socket operation
MACHINE_TIMEOUT = int(os.getenv("MACHINE_TIMEOUT", "5"))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "1"))
