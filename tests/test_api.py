import gzip

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app import create_backup
from models import ActionLog, Puantaj, db


def timesheet_payload(seeded, **overrides):
    payload = {
        'personnelId': seeded['personnel_ids'][0],
        'customerId': seeded['customer_id'],
        'date': '2026-10-19',
        'workType': 'tam',
        'startTime': '08:00',
        'endTime': '17:00',
        'totalHours': '8.00',
        'overtimeHours': '0.00',
        'hourlyRate': '12.50',
        'dailyWage': '100.00',
        'notes': 'Kat 3 sıva',
    }
    payload.update(overrides)
    return payload


def test_personnel_crud(client):
    rv = client.post('/api/personnel', json={
        'name': 'Zeynep Çelik', 'position': 'Usta', 'salary': '4500,50', 'startDate': '2025-02-01'})
    assert rv.status_code == 201
    person = rv.get_json()
    assert person['salary'] == '4500.50'
    assert person['salaryType'] == 'monthly'
    assert person['startDate'] == '2025-02-01'
    assert person['isActive'] is True

    rv = client.put(f"/api/personnel/{person['id']}", json={'salary': '5000', 'salaryType': 'daily'})
    assert rv.status_code == 200
    assert rv.get_json()['salary'] == '5000.00'
    assert rv.get_json()['salaryType'] == 'daily'
    assert rv.get_json()['name'] == 'Zeynep Çelik'

    rv = client.delete(f"/api/personnel/{person['id']}")
    assert rv.status_code == 204
    listed = client.get('/api/personnel').get_json()
    assert listed[0]['isActive'] is False


def test_personnel_validation(client):
    rv = client.post('/api/personnel', json={'name': '', 'salary': '1000'})
    assert rv.status_code == 400
    assert rv.get_json()['error'] == 'Personel adı zorunludur.'

    rv = client.post('/api/personnel', json={'name': 'Can', 'salary': 'bin'})
    assert rv.status_code == 400

    rv = client.post('/api/personnel', data='not json', content_type='text/plain')
    assert rv.status_code == 400


def test_personnel_list_is_ordered(client, seeded):
    listed = client.get('/api/personnel').get_json()
    assert [p['id'] for p in listed] == seeded['personnel_ids']
    assert [p['salary'] for p in listed] == ['3000.00', '6000.00', '9000.00']


def test_customer_crud(client, seeded):
    rv = client.post('/api/customers', json={'name': 'Ege Yapı', 'taxNumber': '1234567890'})
    assert rv.status_code == 201
    cid = rv.get_json()['id']
    assert rv.get_json()['status'] == 'active'

    rv = client.put(f'/api/customers/{cid}', json={'status': 'passive'})
    assert rv.get_json()['status'] == 'passive'

    names = [c['name'] for c in client.get('/api/customers').get_json()]
    assert names == ['Deniz İnşaat', 'Ege Yapı']

    assert client.delete(f'/api/customers/{cid}').status_code == 204
    assert client.delete(f'/api/customers/{cid}').status_code == 404


def test_customer_with_timesheets_cannot_be_deleted(client, seeded):
    client.post('/api/timesheets', json=timesheet_payload(seeded))
    rv = client.delete(f"/api/customers/{seeded['customer_id']}")
    assert rv.status_code == 409


def test_timesheet_create_and_read(client, seeded):
    rv = client.post('/api/timesheets', json=timesheet_payload(seeded))
    assert rv.status_code == 201
    entry = rv.get_json()
    assert entry['date'] == '2026-10-19'
    assert entry['dailyWage'] == '100.00'
    assert entry['notes'] == 'Kat 3 sıva'

    rv = client.get(f"/api/timesheets/{entry['id']}")
    assert rv.get_json()['totalHours'] == '8.00'

    pid = seeded['personnel_ids'][0]
    assert len(client.get(f'/api/timesheets/personnel/{pid}').get_json()) == 1
    assert client.get(f"/api/timesheets/personnel/{seeded['personnel_ids'][1]}").get_json() == []


def test_timesheet_non_overtime_clears_overtime_hours(client, seeded):
    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, overtimeHours='3'))
    assert rv.get_json()['overtimeHours'] == '0.00'


def test_timesheet_validation(client, seeded):
    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, personnelId=999))
    assert rv.status_code == 400
    assert rv.get_json()['error'] == 'Personel bulunamadı.'

    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, customerId=None))
    assert rv.status_code == 400

    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, date='19.10.2026'))
    assert rv.status_code == 400

    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, workType='gece'))
    assert rv.status_code == 400

    rv = client.post('/api/timesheets', json=timesheet_payload(seeded, dailyWage='yüz'))
    assert rv.status_code == 400


def test_timesheet_update_in_place(app, client, seeded):
    entry = client.post('/api/timesheets', json=timesheet_payload(seeded)).get_json()
    rv = client.put(f"/api/timesheets/{entry['id']}", json={
        'workType': 'mesai', 'totalHours': '2', 'overtimeHours': '2', 'dailyWage': '25'})
    assert rv.status_code == 200
    updated = rv.get_json()
    assert updated['id'] == entry['id']
    assert updated['personnelId'] == entry['personnelId']
    assert updated['overtimeHours'] == '2.00'
    assert updated['dailyWage'] == '25.00'

    with app.app_context():
        assert Puantaj.query.count() == 1

    assert client.put('/api/timesheets/999', json={'notes': 'x'}).status_code == 404


def test_timesheet_filters_and_delete(client, seeded):
    p1, p2, _ = seeded['personnel_ids']
    client.post('/api/timesheets', json=timesheet_payload(seeded, personnelId=p1, date='2026-10-01'))
    client.post('/api/timesheets', json=timesheet_payload(seeded, personnelId=p2, date='2026-10-15'))
    client.post('/api/timesheets', json=timesheet_payload(seeded, personnelId=p1, date='2026-11-01'))

    all_entries = client.get('/api/timesheets').get_json()
    assert [e['date'] for e in all_entries] == ['2026-11-01', '2026-10-15', '2026-10-01']

    october = client.get('/api/timesheets?from=2026-10-01&to=2026-10-31').get_json()
    assert len(october) == 2
    assert len(client.get(f'/api/timesheets?personnelId={p1}').get_json()) == 2

    assert client.delete(f"/api/timesheets/{all_entries[0]['id']}").status_code == 204
    assert len(client.get('/api/timesheets').get_json()) == 2


def test_bulk_create(client, seeded):
    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': seeded['personnel_ids'],
        'customerId': seeded['customer_id'],
        'date': '2026-10-19',
        'workType': 'tam',
    })
    assert rv.status_code == 201
    body = rv.get_json()
    assert body['created'] == 3
    assert body['message'] == '3 personel için puantaj kaydı oluşturuldu.'
    assert [i['entry']['dailyWage'] for i in body['items']] == ['100.00', '200.00', '300.00']
    assert {i['entry']['totalHours'] for i in body['items']} == {'8.00'}


def test_bulk_partial_and_validation(client, seeded):
    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': [seeded['personnel_ids'][0], 999],
        'customerId': seeded['customer_id'],
        'workType': 'mesai',
        'overtimeHours': '2',
    })
    assert rv.status_code == 207
    body = rv.get_json()
    assert body['created'] == 1
    assert body['items'][0]['entry']['dailyWage'] == '25.00'
    assert body['items'][1] == {'personnelId': 999, 'ok': False, 'error': 'Personel bulunamadı.'}

    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': [], 'customerId': seeded['customer_id'], 'workType': 'tam'})
    assert rv.status_code == 400
    assert rv.get_json()['message'] == 'Lütfen en az bir personel seçin.'

    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': [1], 'customerId': seeded['customer_id'], 'workType': 'mesai', 'overtimeHours': '0'})
    assert rv.get_json()['message'] == 'Lütfen mesai saati girin.'

    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': [998, 999], 'customerId': seeded['customer_id'], 'workType': 'tam'})
    assert rv.status_code == 400
    assert rv.get_json()['created'] == 0

    assert len(client.get('/api/timesheets').get_json()) == 1


def test_bulk_duplicate_ids_create_one_entry(app, client, seeded):
    pid = seeded['personnel_ids'][0]
    rv = client.post('/api/timesheets/bulk', json={
        'personnelIds': [pid, pid, str(pid)],
        'customerId': seeded['customer_id'],
        'workType': 'tam',
    })
    assert rv.status_code == 201
    body = rv.get_json()
    assert body['created'] == 1
    assert body['failed'] == 0
    assert len(body['items']) == 1
    with app.app_context():
        assert Puantaj.query.count() == 1


def test_payments_and_summary(client, seeded):
    pid = seeded['personnel_ids'][0]
    client.post('/api/timesheets', json=timesheet_payload(seeded))
    client.post('/api/timesheets', json=timesheet_payload(
        seeded, workType='mesai', totalHours='2', overtimeHours='2', dailyWage='25'))

    rv = client.post('/api/personnel-payments', json={'personnelId': pid, 'amount': '60', 'paymentType': 'advance'})
    assert rv.status_code == 201
    payment = rv.get_json()
    assert payment['amount'] == '60.00'

    assert client.post('/api/personnel-payments', json={'personnelId': pid, 'amount': '0'}).status_code == 400
    assert client.post('/api/personnel-payments', json={'personnelId': pid, 'amount': '5', 'paymentType': 'x'}).status_code == 400

    summary = client.get(f'/api/personnel/{pid}/summary').get_json()
    assert summary['timesheetCount'] == 2
    assert summary['totalHours'] == '10.00'
    assert summary['totalOvertimeHours'] == '2.00'
    assert summary['totalEarnings'] == '125.00'
    assert summary['totalPayments'] == '60.00'
    assert summary['balance'] == '65.00'

    client.put(f"/api/personnel-payments/{payment['id']}", json={'amount': '125'})
    assert client.get(f'/api/personnel/{pid}/summary').get_json()['balance'] == '0.00'

    assert client.delete(f"/api/personnel-payments/{payment['id']}").status_code == 204
    assert client.get('/api/personnel-payments').get_json() == []


def test_unknown_api_path_returns_json(client):
    rv = client.get('/api/yok')
    assert rv.status_code == 404
    assert rv.get_json()['message'] == 'Kayıt bulunamadı.'


def test_actions_are_logged(app, client, seeded):
    client.post('/api/timesheets', json=timesheet_payload(seeded))
    with app.app_context():
        log = ActionLog.query.filter_by(Modul='Puantaj').one()
        assert log.IslemTuru == 'Ekleme'


def test_backup_keeps_latest(app, tmp_path):
    for _ in range(3):
        assert create_backup(app) is not None
    backups = sorted((tmp_path / 'backups').glob('*.db.gz'))
    assert len(backups) == 2
    with gzip.open(backups[-1], 'rb') as f:
        assert f.read(16).startswith(b'SQLite format 3')


def test_backup_skips_memory_database():
    from app import create_app
    memory_app = create_app({'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:'})
    assert create_backup(memory_app) is None


def test_sqlite_foreign_keys_enforced(app, seeded):
    with app.app_context():
        assert db.session.execute(text('PRAGMA foreign_keys')).scalar() == 1
        db.session.add(Puantaj(PersonelID=999, MusteriID=seeded['customer_id'], Tarih='2026-10-19'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
