import os
import gzip
import shutil
from datetime import date, datetime, timedelta
from pathlib import Path
from flask import Flask, request, jsonify
from sqlalchemy.exc import IntegrityError
import services
import config
from models import db, Personel, Musteri, Puantaj, PersonelOdeme, ActionLog

SALARY_TYPES = ('monthly', 'daily')
CUSTOMER_STATUSES = ('active', 'passive')
PAYMENT_TYPES = ('salary', 'advance', 'bonus')


def sqlite_path_from_uri(uri):
    if not uri or not uri.startswith('sqlite:///'):
        return None
    path = uri[len('sqlite:///'):]
    return Path(path) if path and path != ':memory:' else None


def create_backup(app, backup_dir=None, keep=None):
    """Veritabanının sıkıştırılmış yedeğini alır, son `keep` yedeği saklar"""
    db_path = sqlite_path_from_uri(app.config.get('SQLALCHEMY_DATABASE_URI'))
    if db_path is None or not db_path.exists():
        app.logger.info('Yedekleme atlandı: SQLite dosyası yok.')
        return None

    backup_dir = Path(backup_dir or app.config.get('BACKUP_DIR', config.BACKUP_DIR))
    keep = keep if keep is not None else app.config.get('BACKUP_KEEP', config.BACKUP_KEEP)
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        backup_file = backup_dir / f"puantropls_backup_{timestamp}.db.gz"

        with open(db_path, 'rb') as f_in:
            with gzip.open(backup_file, 'wb') as f_out:
                shutil.copyfileobj(f_in, f_out)

        # Eski yedekleri temizle
        backups = sorted(backup_dir.glob('puantropls_backup_*.db.gz'), key=lambda p: p.name, reverse=True)
        for old_backup in backups[keep:]:
            try:
                os.remove(old_backup)
            except OSError:
                app.logger.warning(f'Eski yedek silinemedi: {old_backup}')

        app.logger.info(f'Yedek oluşturuldu: {backup_file}')
        return backup_file
    except OSError:
        app.logger.exception('Yedekleme hatası')
        return None


def log_action(islem_turu, modul, detay=None):
    """Sistem günlüklerini kaydeder"""
    try:
        log = ActionLog(
            IslemTuru=islem_turu,
            Modul=modul,
            Detay=detay,
            IpAdresi=request.remote_addr
        )
        db.session.add(log)
        db.session.commit()
    except Exception:
        db.session.rollback()


def parse_date(v):
    s = services.to_date_string(v)
    return datetime.strptime(s, '%Y-%m-%d').date() if s else None


def parse_id(v):
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def personel_json(p):
    return {
        'id': p.PersonelID,
        'name': p.Ad,
        'position': p.Pozisyon,
        'salary': services.format_decimal(p.Maas),
        'salaryType': p.MaasTuru,
        'phone': p.Telefon,
        'email': p.Email,
        'startDate': p.IseBaslamaTarihi.isoformat() if p.IseBaslamaTarihi else None,
        'isActive': p.Aktif,
    }


def musteri_json(m):
    return {
        'id': m.MusteriID,
        'name': m.Ad,
        'company': m.Firma,
        'phone': m.Telefon,
        'email': m.Email,
        'address': m.Adres,
        'taxNumber': m.VergiNo,
        'status': m.Durum,
    }


def puantaj_json(r):
    return {
        'id': r.PuantajID,
        'personnelId': r.PersonelID,
        'customerId': r.MusteriID,
        'date': r.Tarih.isoformat(),
        'workType': r.CalismaTuru,
        'startTime': r.BaslangicSaati,
        'endTime': r.BitisSaati,
        'totalHours': services.format_decimal(r.ToplamSaat),
        'overtimeHours': services.format_decimal(r.MesaiSaati),
        'hourlyRate': services.format_decimal(r.SaatlikUcret),
        'dailyWage': services.format_decimal(r.GunlukUcret),
        'notes': r.Notlar or '',
        'createdAt': r.EklemeTarihi.isoformat() if r.EklemeTarihi else None,
    }


def odeme_json(o):
    return {
        'id': o.OdemeID,
        'personnelId': o.PersonelID,
        'amount': services.format_decimal(o.Tutar),
        'paymentDate': o.OdemeTarihi.isoformat(),
        'paymentType': o.OdemeTuru,
        'description': o.Aciklama or '',
        'notes': o.Notlar or '',
    }


class InvalidPayload(Exception):
    """İstek gövdesi doğrulanamadı (400)."""


def apply_personel(p, data, partial=False):
    if 'name' in data or not partial:
        name = (data.get('name') or '').strip()
        if not name:
            raise InvalidPayload('Personel adı zorunludur.')
        p.Ad = name
    if 'position' in data or not partial:
        p.Pozisyon = (data.get('position') or '').strip()
    if 'salary' in data or not partial:
        salary = services.parse_decimal(data.get('salary'), None)
        if salary is None or salary < 0:
            raise InvalidPayload('Geçersiz maaş değeri.')
        p.Maas = services.round2(salary)
    if 'salaryType' in data or not partial:
        salary_type = data.get('salaryType') or 'monthly'
        if salary_type not in SALARY_TYPES:
            raise InvalidPayload('Geçersiz maaş türü.')
        p.MaasTuru = salary_type
    if 'phone' in data:
        p.Telefon = data.get('phone') or None
    if 'email' in data:
        email = (data.get('email') or '').strip() or None
        if email and '@' not in email:
            raise InvalidPayload('Geçersiz e-posta adresi')
        p.Email = email
    if 'startDate' in data:
        start_date = parse_date(data.get('startDate'))
        if data.get('startDate') and start_date is None:
            raise InvalidPayload('Geçersiz tarih.')
        p.IseBaslamaTarihi = start_date
    if 'isActive' in data:
        p.Aktif = bool(data.get('isActive'))


def apply_musteri(m, data, partial=False):
    if 'name' in data or not partial:
        name = (data.get('name') or '').strip()
        if not name:
            raise InvalidPayload('Müşteri adı zorunludur.')
        m.Ad = name
    for key, attr in (('company', 'Firma'), ('phone', 'Telefon'), ('address', 'Adres'), ('taxNumber', 'VergiNo')):
        if key in data:
            setattr(m, attr, data.get(key) or None)
    if 'email' in data:
        email = (data.get('email') or '').strip() or None
        if email and '@' not in email:
            raise InvalidPayload('Geçersiz e-posta adresi')
        m.Email = email
    if 'status' in data or not partial:
        status = data.get('status') or 'active'
        if status not in CUSTOMER_STATUSES:
            raise InvalidPayload('Geçersiz müşteri durumu.')
        m.Durum = status


def apply_puantaj(r, data, partial=False):
    if 'personnelId' in data or not partial:
        pid = parse_id(data.get('personnelId'))
        if pid is None or db.session.get(Personel, pid) is None:
            raise InvalidPayload('Personel bulunamadı.')
        r.PersonelID = pid
    if 'customerId' in data or not partial:
        cid = parse_id(data.get('customerId'))
        if cid is None or db.session.get(Musteri, cid) is None:
            raise InvalidPayload('Müşteri bulunamadı.')
        r.MusteriID = cid
    if 'date' in data or not partial:
        tarih = parse_date(data.get('date'))
        if tarih is None:
            raise InvalidPayload('Geçersiz tarih.')
        r.Tarih = tarih
    if 'workType' in data or not partial:
        work_type = data.get('workType') or services.WORK_TYPE_FULL
        if work_type not in services.WORK_TYPES:
            raise InvalidPayload('Geçersiz çalışma şekli.')
        r.CalismaTuru = work_type
    if 'startTime' in data or not partial:
        r.BaslangicSaati = data.get('startTime') or '08:00'
    if 'endTime' in data or not partial:
        r.BitisSaati = data.get('endTime') or '17:00'
    for key, attr in (('totalHours', 'ToplamSaat'), ('overtimeHours', 'MesaiSaati'),
                      ('hourlyRate', 'SaatlikUcret'), ('dailyWage', 'GunlukUcret')):
        if key in data or not partial:
            raw = data.get(key)
            value = services.parse_decimal(raw, None)
            if value is None:
                if raw not in (None, ''):
                    raise InvalidPayload(f'Geçersiz sayı: {key}')
                value = services.parse_decimal(getattr(r, attr))
            if value < 0:
                raise InvalidPayload(f'Negatif değer: {key}')
            setattr(r, attr, services.round2(value))
    if 'notes' in data:
        r.Notlar = data.get('notes') or None
    # Mesai dışındaki kayıtlarda mesai saati her zaman 0
    if r.CalismaTuru != services.WORK_TYPE_OVERTIME:
        r.MesaiSaati = services.round2(0)


def apply_odeme(o, data, partial=False):
    if 'personnelId' in data or not partial:
        pid = parse_id(data.get('personnelId'))
        if pid is None or db.session.get(Personel, pid) is None:
            raise InvalidPayload('Personel bulunamadı.')
        o.PersonelID = pid
    if 'amount' in data or not partial:
        amount = services.parse_decimal(data.get('amount'), None)
        if amount is None or amount <= 0:
            raise InvalidPayload('Geçersiz ödeme tutarı.')
        o.Tutar = services.round2(amount)
    if 'paymentDate' in data or not partial:
        odeme_tarihi = parse_date(data.get('paymentDate')) if data.get('paymentDate') else date.today()
        if odeme_tarihi is None:
            raise InvalidPayload('Geçersiz tarih.')
        o.OdemeTarihi = odeme_tarihi
    if 'paymentType' in data or not partial:
        payment_type = data.get('paymentType') or 'salary'
        if payment_type not in PAYMENT_TYPES:
            raise InvalidPayload('Geçersiz ödeme türü.')
        o.OdemeTuru = payment_type
    if 'description' in data:
        o.Aciklama = data.get('description') or None
    if 'notes' in data:
        o.Notlar = data.get('notes') or None


def create_app(test_config=None):
    app = Flask(__name__)

    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URI', config.DATABASE_URI)
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', config.SECRET_KEY)
    app.config['BACKUP_DIR'] = config.BACKUP_DIR
    app.config['BACKUP_KEEP'] = config.BACKUP_KEEP
    if test_config:
        app.config.update(test_config)
    # Türkçe karakterler JSON yanıtlarında olduğu gibi kalsın
    app.json.ensure_ascii = False

    db.init_app(app)

    with app.app_context():
        db.create_all()

    def json_body():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise InvalidPayload('Geçersiz JSON gövdesi.')
        return data

    def error(message, status, detail=None):
        body = {'message': message}
        if detail:
            body['error'] = detail
        return jsonify(body), status

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith('/api'):
            return error('Kayıt bulunamadı.', 404)
        return e

    @app.errorhandler(405)
    def method_not_allowed(e):
        if request.path.startswith('/api'):
            return error('Bu işlem desteklenmiyor.', 405)
        return e

    # Personel
    @app.route('/api/personnel', methods=['GET'])
    def api_personnel_list():
        try:
            people = Personel.query.order_by(Personel.PersonelID.asc()).all()
            return jsonify([personel_json(p) for p in people])
        except Exception as e:
            app.logger.exception('Personnel list error')
            return error('Personel listesi alınamadı.', 500, str(e))

    @app.route('/api/personnel', methods=['POST'])
    def api_personnel_create():
        try:
            p = Personel(Ad='')
            apply_personel(p, json_body())
            db.session.add(p)
            db.session.commit()
            log_action("Ekleme", "Personel", f"{p.Ad} personeli eklendi.")
            return jsonify(personel_json(p)), 201
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz personel verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Create personnel error')
            return error('Personel kaydedilemedi.', 500, str(e))

    @app.route('/api/personnel/<int:pid>', methods=['PUT'])
    def api_personnel_update(pid):
        p = db.get_or_404(Personel, pid)
        try:
            apply_personel(p, json_body(), partial=True)
            db.session.commit()
            log_action("Güncelleme", "Personel", f"{p.Ad} personeli güncellendi.")
            return jsonify(personel_json(p))
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz personel verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Edit personnel error')
            return error('Personel güncellenemedi.', 500, str(e))

    @app.route('/api/personnel/<int:pid>', methods=['DELETE'])
    def api_personnel_delete(pid):
        p = db.get_or_404(Personel, pid)
        try:
            p.Aktif = False  # Soft delete
            db.session.commit()
            log_action("Arşivleme", "Personel", f"{p.Ad} personeli arşivlendi.")
            return '', 204
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Delete personnel error')
            return error('Personel silinemedi.', 500, str(e))

    @app.route('/api/personnel/<int:pid>/summary', methods=['GET'])
    def api_personnel_summary(pid):
        p = db.get_or_404(Personel, pid)
        try:
            entries = Puantaj.query.filter_by(PersonelID=pid).all()
            payments = PersonelOdeme.query.filter_by(PersonelID=pid).all()
            summary = services.summarize_account(
                [puantaj_json(r) for r in entries],
                [odeme_json(o) for o in payments]
            )
            summary['personnelId'] = p.PersonelID
            summary['name'] = p.Ad
            return jsonify(summary)
        except Exception as e:
            app.logger.exception('Personnel summary error')
            return error('Personel özeti alınamadı.', 500, str(e))

    # Müşteriler
    @app.route('/api/customers', methods=['GET'])
    def api_customers_list():
        try:
            customers = Musteri.query.order_by(Musteri.Ad.asc()).all()
            return jsonify([musteri_json(m) for m in customers])
        except Exception as e:
            app.logger.exception('Customer list error')
            return error('Müşteri listesi alınamadı.', 500, str(e))

    @app.route('/api/customers', methods=['POST'])
    def api_customers_create():
        try:
            m = Musteri(Ad='')
            apply_musteri(m, json_body())
            db.session.add(m)
            db.session.commit()
            log_action("Ekleme", "Musteri", f"{m.Ad} müşterisi eklendi.")
            return jsonify(musteri_json(m)), 201
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz müşteri verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Create customer error')
            return error('Müşteri kaydedilemedi.', 500, str(e))

    @app.route('/api/customers/<int:cid>', methods=['PUT'])
    def api_customers_update(cid):
        m = db.get_or_404(Musteri, cid)
        try:
            apply_musteri(m, json_body(), partial=True)
            db.session.commit()
            log_action("Güncelleme", "Musteri", f"{m.Ad} müşterisi güncellendi.")
            return jsonify(musteri_json(m))
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz müşteri verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Edit customer error')
            return error('Müşteri güncellenemedi.', 500, str(e))

    @app.route('/api/customers/<int:cid>', methods=['DELETE'])
    def api_customers_delete(cid):
        m = db.get_or_404(Musteri, cid)
        if Puantaj.query.filter_by(MusteriID=cid).count():
            return error('Bu müşteriye ait puantaj kayıtları var.', 409)
        try:
            db.session.delete(m)
            db.session.commit()
            log_action("Silme", "Musteri", f"{m.Ad} müşterisi silindi.")
            return '', 204
        except IntegrityError as e:
            db.session.rollback()
            return error('Bu müşteriye ait kayıtlar var.', 409, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Delete customer error')
            return error('Müşteri silinemedi.', 500, str(e))

    # Puantaj
    @app.route('/api/timesheets', methods=['GET'])
    def api_timesheets_list():
        try:
            query = Puantaj.query
            pid = parse_id(request.args.get('personnelId'))
            if pid is not None:
                query = query.filter(Puantaj.PersonelID == pid)
            cid = parse_id(request.args.get('customerId'))
            if cid is not None:
                query = query.filter(Puantaj.MusteriID == cid)
            date_from = parse_date(request.args.get('from'))
            if date_from:
                query = query.filter(Puantaj.Tarih >= date_from)
            date_to = parse_date(request.args.get('to'))
            if date_to:
                query = query.filter(Puantaj.Tarih <= date_to)
            records = query.order_by(Puantaj.Tarih.desc(), Puantaj.PuantajID.desc()).all()
            return jsonify([puantaj_json(r) for r in records])
        except Exception as e:
            app.logger.exception('Timesheet list error')
            return error('Puantaj kayıtları alınamadı.', 500, str(e))

    @app.route('/api/timesheets/personnel/<int:pid>', methods=['GET'])
    def api_timesheets_by_personnel(pid):
        try:
            records = Puantaj.query.filter_by(PersonelID=pid).order_by(Puantaj.Tarih.desc()).all()
            return jsonify([puantaj_json(r) for r in records])
        except Exception as e:
            app.logger.exception('Timesheet list error')
            return error('Puantaj kayıtları alınamadı.', 500, str(e))

    @app.route('/api/timesheets/<int:tid>', methods=['GET'])
    def api_timesheets_get(tid):
        return jsonify(puantaj_json(db.get_or_404(Puantaj, tid)))

    @app.route('/api/timesheets', methods=['POST'])
    def api_timesheets_create():
        try:
            r = Puantaj(PersonelID=None, MusteriID=None, Tarih=date.today())
            apply_puantaj(r, json_body())
            db.session.add(r)
            db.session.commit()
            log_action("Ekleme", "Puantaj", f"P:{r.PersonelID} {r.Tarih} {r.CalismaTuru} puantajı eklendi.")
            return jsonify(puantaj_json(r)), 201
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz puantaj verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Create timesheet error')
            return error('Puantaj kaydı oluşturulamadı.', 500, str(e))

    @app.route('/api/timesheets/<int:tid>', methods=['PUT'])
    def api_timesheets_update(tid):
        r = db.get_or_404(Puantaj, tid)
        try:
            apply_puantaj(r, json_body(), partial=True)
            db.session.commit()
            log_action("Güncelleme", "Puantaj", f"{r.PuantajID} numaralı puantaj güncellendi.")
            return jsonify(puantaj_json(r))
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz puantaj verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Edit timesheet error')
            return error('Puantaj kaydı güncellenemedi.', 500, str(e))

    @app.route('/api/timesheets/<int:tid>', methods=['DELETE'])
    def api_timesheets_delete(tid):
        r = db.get_or_404(Puantaj, tid)
        try:
            db.session.delete(r)
            db.session.commit()
            log_action("Silme", "Puantaj", f"{tid} numaralı puantaj silindi.")
            return '', 204
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Delete timesheet error')
            return error('Puantaj kaydı silinemedi.', 500, str(e))

    @app.route('/api/timesheets/bulk', methods=['POST'])
    def api_timesheets_bulk():
        """Seçili personeller için toplu puantaj; personel bazında sonuç döner"""
        try:
            data = json_body()
        except InvalidPayload as e:
            return error('Geçersiz puantaj verisi.', 400, str(e))

        personnel_ids = data.get('personnelIds') or []
        if not isinstance(personnel_ids, list):
            return error('Geçersiz puantaj verisi.', 400, 'personnelIds bir liste olmalıdır.')
        work_type = data.get('workType')
        ok, message = services.validate_selection(
            personnel_ids, data.get('customerId'), work_type, data.get('overtimeHours'))
        if not ok:
            return error(message, 400)

        customer_id = parse_id(data.get('customerId'))
        if customer_id is None or db.session.get(Musteri, customer_id) is None:
            return error('Müşteri bulunamadı.', 400)
        if data.get('date') and parse_date(data.get('date')) is None:
            return error('Geçersiz tarih.', 400)

        values = dict(data)
        values['customerId'] = customer_id
        items = []
        created = []
        seen = set()
        try:
            for raw_id in personnel_ids:
                pid = parse_id(raw_id)
                # Aynı personel listede birden çok kez varsa tek kayıt açılır
                key = pid if pid is not None else str(raw_id)
                if key in seen:
                    continue
                seen.add(key)
                p = db.session.get(Personel, pid) if pid is not None else None
                if p is None:
                    items.append({'personnelId': raw_id, 'ok': False, 'error': 'Personel bulunamadı.'})
                    continue
                payload = services.build_timesheet_payload(values, personel_json(p), work_type)
                r = Puantaj(PersonelID=None, MusteriID=None, Tarih=date.today())
                apply_puantaj(r, payload)
                db.session.add(r)
                created.append(r)
                items.append({'personnelId': pid, 'ok': True, 'entry': r})
            db.session.commit()
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz puantaj verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Bulk timesheet error')
            return error('Puantaj kayıtları oluşturulamadı.', 500, str(e))

        for item in items:
            if item['ok']:
                item['entry'] = puantaj_json(item['entry'])
        if created:
            log_action("Ekleme", "Puantaj", f"{len(created)} personel için toplu puantaj eklendi.")

        failed = len(items) - len(created)
        body = {
            'created': len(created),
            'failed': failed,
            'items': items,
            'message': f'{len(created)} personel için puantaj kaydı oluşturuldu.',
        }
        if not created:
            body['message'] = 'Puantaj kayıtları oluşturulamadı.'
            return jsonify(body), 400
        return jsonify(body), 207 if failed else 201

    # Personel ödemeleri
    @app.route('/api/personnel-payments', methods=['GET'])
    def api_payments_list():
        try:
            query = PersonelOdeme.query
            pid = parse_id(request.args.get('personnelId'))
            if pid is not None:
                query = query.filter(PersonelOdeme.PersonelID == pid)
            payments = query.order_by(PersonelOdeme.OdemeTarihi.desc(), PersonelOdeme.OdemeID.desc()).all()
            return jsonify([odeme_json(o) for o in payments])
        except Exception as e:
            app.logger.exception('Payment list error')
            return error('Ödemeler alınamadı.', 500, str(e))

    @app.route('/api/personnel-payments', methods=['POST'])
    def api_payments_create():
        try:
            o = PersonelOdeme(PersonelID=None, Tutar=0, OdemeTarihi=date.today())
            apply_odeme(o, json_body())
            db.session.add(o)
            db.session.commit()
            log_action("Ekleme", "PersonelOdeme", f"P:{o.PersonelID} için {o.Tutar} TL ödeme eklendi.")
            return jsonify(odeme_json(o)), 201
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz ödeme verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Create payment error')
            return error('Ödeme kaydedilemedi.', 500, str(e))

    @app.route('/api/personnel-payments/<int:oid>', methods=['PUT'])
    def api_payments_update(oid):
        o = db.get_or_404(PersonelOdeme, oid)
        try:
            apply_odeme(o, json_body(), partial=True)
            db.session.commit()
            log_action("Güncelleme", "PersonelOdeme", f"{oid} numaralı ödeme güncellendi.")
            return jsonify(odeme_json(o))
        except InvalidPayload as e:
            db.session.rollback()
            return error('Geçersiz ödeme verisi.', 400, str(e))
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Edit payment error')
            return error('Ödeme güncellenemedi.', 500, str(e))

    @app.route('/api/personnel-payments/<int:oid>', methods=['DELETE'])
    def api_payments_delete(oid):
        o = db.get_or_404(PersonelOdeme, oid)
        try:
            db.session.delete(o)
            db.session.commit()
            log_action("Silme", "PersonelOdeme", f"{oid} numaralı ödeme silindi.")
            return '', 204
        except Exception as e:
            db.session.rollback()
            app.logger.exception('Delete payment error')
            return error('Ödeme silinemedi.', 500, str(e))

    return app


from apscheduler.schedulers.background import BackgroundScheduler

def init_scheduler(app):
    scheduler = BackgroundScheduler()

    # Veritabanı Yedekleme (Günde bir kez)
    scheduler.add_job(
        func=create_backup,
        args=[app],
        trigger='interval',
        days=1,
        next_run_time=datetime.now() + timedelta(seconds=10)
    )

    scheduler.start()
    return scheduler

if __name__ == '__main__':
    app = create_app()
    init_scheduler(app)
    app.run(debug=True, host='0.0.0.0', port=5000, use_reloader=False)
