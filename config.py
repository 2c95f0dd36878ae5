import os
from pathlib import Path

# Uygulama ana dizini
APP_DIR = Path(__file__).parent

# Veri dizini (yazılabilir alan)
DATA_DIR = Path(os.environ.get('PUANTROPLS_DATA_DIR', str(APP_DIR)))

# Veritabanı dosya yolu
DATABASE_PATH = DATA_DIR / 'data' / 'puantropls.db'

# Veritabanı klasörü yoksa oluştur
os.makedirs(DATA_DIR / 'data', exist_ok=True)

# SQLite veritabanı bağlantısı
DATABASE_URI = os.environ.get('DATABASE_URI', f'sqlite:///{DATABASE_PATH}')

# Flask secret key - Üretimde değiştirilmeli!
SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

# Yedek klasörü
BACKUP_DIR = DATA_DIR / 'backups'
os.makedirs(BACKUP_DIR, exist_ok=True)

# Saklanacak yedek sayısı
BACKUP_KEEP = int(os.environ.get('BACKUP_KEEP', 5))

# İstemci ayarları (toplu puantaj gönderimi)
API_BASE_URL = os.environ.get('API_BASE_URL', 'http://127.0.0.1:5000')
API_TIMEOUT = float(os.environ.get('API_TIMEOUT', 10))
