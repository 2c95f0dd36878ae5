import sqlite3
from flask_sqlalchemy import SQLAlchemy
from datetime import datetime
from sqlalchemy import Index, event
from sqlalchemy.engine import Engine

db = SQLAlchemy()


# SQLite bağlantılarında yabancı anahtar desteğini etkinleştir
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _parse_date_fields(kwargs, fields, fallback=None):
    # SQLite için tarih alanlarını doğru formata getir
    for field in fields:
        if field in kwargs and isinstance(kwargs[field], str):
            try:
                kwargs[field] = datetime.strptime(kwargs[field][:10], '%Y-%m-%d').date()
            except (ValueError, TypeError):
                kwargs[field] = fallback() if fallback else None
    return kwargs


class Personel(db.Model):
    __tablename__ = 'Personel'
    __table_args__ = {
        'sqlite_autoincrement': True
    }
    PersonelID = db.Column(db.Integer, primary_key=True, autoincrement=True)
    Ad = db.Column(db.String(200), nullable=False)
    Pozisyon = db.Column(db.String(120), nullable=False, default='')
    Maas = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    MaasTuru = db.Column(db.String(20), nullable=False, default='monthly')  # 'monthly' veya 'daily'
    Telefon = db.Column(db.String(20), nullable=True)
    Email = db.Column(db.String(200), nullable=True)
    IseBaslamaTarihi = db.Column(db.Date, nullable=True)
    Aktif = db.Column(db.Boolean, nullable=False, default=True)
    EklemeTarihi = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    # İlişkiler
    Puantaj = db.relationship('Puantaj', back_populates='Personel')
    Odemeler = db.relationship('PersonelOdeme', back_populates='Personel')

    def __init__(self, **kwargs):
        _parse_date_fields(kwargs, ['IseBaslamaTarihi'])
        super(Personel, self).__init__(**kwargs)

    def __repr__(self):
        return f"<Personel {self.PersonelID} {self.Ad}>"


class Musteri(db.Model):
    __tablename__ = 'Musteri'
    __table_args__ = {
        'sqlite_autoincrement': True
    }
    MusteriID = db.Column(db.Integer, primary_key=True, autoincrement=True)
    Ad = db.Column(db.String(200), nullable=False)
    Firma = db.Column(db.String(200), nullable=True)
    Telefon = db.Column(db.String(20), nullable=True)
    Email = db.Column(db.String(200), nullable=True)
    Adres = db.Column(db.String(500), nullable=True)
    VergiNo = db.Column(db.String(50), nullable=True)
    Durum = db.Column(db.String(20), nullable=False, default='active')  # 'active' veya 'passive'
    EklemeTarihi = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    Puantaj = db.relationship('Puantaj', back_populates='Musteri')

    def __repr__(self):
        return f"<Musteri {self.MusteriID} {self.Ad}>"


class Puantaj(db.Model):
    __tablename__ = 'Puantaj'
    __table_args__ = (
        Index('ix_puantaj_personel_tarih', 'PersonelID', 'Tarih'),
        {'sqlite_autoincrement': True},
    )
    PuantajID = db.Column(db.Integer, primary_key=True, autoincrement=True)
    PersonelID = db.Column(db.Integer, db.ForeignKey('Personel.PersonelID'), nullable=False)
    MusteriID = db.Column(db.Integer, db.ForeignKey('Musteri.MusteriID'), nullable=False)
    Tarih = db.Column(db.Date, nullable=False)
    CalismaTuru = db.Column(db.String(10), nullable=False, default='tam')  # tam / yarim / mesai
    BaslangicSaati = db.Column(db.String(5), nullable=False, default='08:00')
    BitisSaati = db.Column(db.String(5), nullable=False, default='17:00')
    ToplamSaat = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    MesaiSaati = db.Column(db.Numeric(6, 2), nullable=False, default=0)
    SaatlikUcret = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    GunlukUcret = db.Column(db.Numeric(12, 2), nullable=False, default=0)  # Hesaplanan ücret
    Notlar = db.Column(db.String(1000), nullable=True)
    EklemeTarihi = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    Personel = db.relationship('Personel', back_populates='Puantaj')
    Musteri = db.relationship('Musteri', back_populates='Puantaj')

    def __init__(self, **kwargs):
        _parse_date_fields(kwargs, ['Tarih'], fallback=lambda: datetime.utcnow().date())
        super(Puantaj, self).__init__(**kwargs)

    def __repr__(self):
        return f"<Puantaj {self.PuantajID} P:{self.PersonelID} {self.Tarih} {self.CalismaTuru}>"


class PersonelOdeme(db.Model):
    __tablename__ = 'PersonelOdeme'
    __table_args__ = {
        'sqlite_autoincrement': True
    }
    OdemeID = db.Column(db.Integer, primary_key=True, autoincrement=True)
    PersonelID = db.Column(db.Integer, db.ForeignKey('Personel.PersonelID'), nullable=False)
    Tutar = db.Column(db.Numeric(12, 2), nullable=False)
    OdemeTarihi = db.Column(db.Date, nullable=False)
    OdemeTuru = db.Column(db.String(20), nullable=False, default='salary')  # salary / advance / bonus
    Aciklama = db.Column(db.String(500), nullable=True)
    Notlar = db.Column(db.String(1000), nullable=True)
    EklemeTarihi = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    Personel = db.relationship('Personel', back_populates='Odemeler')

    def __init__(self, **kwargs):
        _parse_date_fields(kwargs, ['OdemeTarihi'], fallback=lambda: datetime.utcnow().date())
        super(PersonelOdeme, self).__init__(**kwargs)

    def __repr__(self):
        return f"<PersonelOdeme {self.OdemeID} P:{self.PersonelID} {self.Tutar}>"


class ActionLog(db.Model):
    __tablename__ = 'IslemLoglari'
    __table_args__ = {
        'sqlite_autoincrement': True
    }
    LogID = db.Column(db.Integer, primary_key=True, autoincrement=True)
    IslemTuru = db.Column(db.String(50), nullable=False)  # Ekleme, Silme, Güncelleme
    Modul = db.Column(db.String(50), nullable=False)  # Personel, Musteri, Puantaj
    Detay = db.Column(db.String(500), nullable=True)
    IpAdresi = db.Column(db.String(50), nullable=True)
    Tarih = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self):
        return f"<ActionLog {self.LogID} {self.IslemTuru} on {self.Modul}>"
