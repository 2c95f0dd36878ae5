import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

logger = logging.getLogger(__name__)

# Çalışma şekilleri: tam gün, yarım gün, sadece mesai
WORK_TYPE_FULL = 'tam'
WORK_TYPE_HALF = 'yarim'
WORK_TYPE_OVERTIME = 'mesai'
WORK_TYPES = (WORK_TYPE_FULL, WORK_TYPE_HALF, WORK_TYPE_OVERTIME)

DAYS_PER_MONTH = Decimal('30')
HOURS_PER_DAY = Decimal('8')

FULL_DAY_HOURS = Decimal('8.00')
HALF_DAY_HOURS = Decimal('4.00')

TWO_PLACES = Decimal('0.01')

MSG_SELECT_PERSONNEL = 'Lütfen en az bir personel seçin.'
MSG_SELECT_CUSTOMER = 'Lütfen müşteri seçin.'
MSG_SELECT_WORK_TYPE = 'Lütfen çalışma şekli seçin.'
MSG_ENTER_OVERTIME = 'Lütfen mesai saati girin.'


def parse_decimal(v, default=Decimal('0')):
    """Metin olarak gelen sayıyı Decimal tipine güvenli bir şekilde dönüştürür.
    Virgül veya nokta ayıraçlarını destekler."""
    if v is None or isinstance(v, bool):
        return default
    if isinstance(v, Decimal):
        return v if v.is_finite() else default
    if isinstance(v, int):
        return Decimal(v)
    if isinstance(v, float):
        v = str(v)
    try:
        s = str(v).replace(',', '.').strip()
        if not s:
            return default
        d = Decimal(s)
    except (InvalidOperation, ValueError, TypeError):
        return default
    if not d.is_finite():
        return default
    return d


def round2(value):
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_decimal(value):
    """2 basamaklı sabit nokta gösterimi: '8.00'"""
    return str(round2(parse_decimal(value)))


def compute_wage(monthly_salary, work_type, overtime_hours=None):
    """
    Aylık maaş ve çalışma şekline göre o günün saat, saatlik ücret ve
    ücretini hesaplar.

    Günlük ücret = maaş / 30, saatlik ücret = günlük ücret / 8.
    Mesai ücreti 2 basamağa yuvarlanmış saatlik ücret üzerinden hesaplanır.
    Okunamayan maaş 0 kabul edilir.
    """
    salary = parse_decimal(monthly_salary, None)
    if salary is None:
        if monthly_salary not in (None, ''):
            logger.warning('Maaş değeri okunamadı, 0 kabul edildi: %r', monthly_salary)
        salary = Decimal('0')

    daily_wage = salary / DAYS_PER_MONTH
    hourly_rate = round2(daily_wage / HOURS_PER_DAY)

    if work_type == WORK_TYPE_FULL:
        total_hours = FULL_DAY_HOURS
        wage = round2(daily_wage)
    elif work_type == WORK_TYPE_HALF:
        total_hours = HALF_DAY_HOURS
        wage = round2(daily_wage / 2)
    elif work_type == WORK_TYPE_OVERTIME:
        hours = parse_decimal(overtime_hours)
        total_hours = round2(hours)
        wage = round2(hourly_rate * hours)
    else:
        raise ValueError(f'Bilinmeyen çalışma şekli: {work_type!r}')

    return {
        'totalHours': total_hours,
        'hourlyRate': hourly_rate,
        'wage': wage,
    }


def monthly_salary_for(personnel):
    """Personel kaydından aylık maaş tabanını döner (günlük ücretliler için x30)."""
    salary = parse_decimal(personnel.get('salary'), None)
    if salary is None:
        return personnel.get('salary')
    if personnel.get('salaryType') == 'daily':
        return salary * DAYS_PER_MONTH
    return salary


def validate_selection(selected_personnel_ids, customer_id, work_type, overtime_hours, editing_entry=None):
    """
    Gönderim öncesi kontrol. İlk başarısız kural kazanır.
    Returns (ok, message).
    """
    if editing_entry is None and not selected_personnel_ids:
        return False, MSG_SELECT_PERSONNEL
    if not customer_id:
        return False, MSG_SELECT_CUSTOMER
    if work_type not in WORK_TYPES:
        return False, MSG_SELECT_WORK_TYPE
    if work_type == WORK_TYPE_OVERTIME:
        hours = parse_decimal(overtime_hours, None)
        if hours is None or hours <= 0:
            return False, MSG_ENTER_OVERTIME
    return True, None


def to_date_string(value):
    """Tarihi form formatına (YYYY-MM-DD) çevirir, çevrilemezse None."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    s = str(value).strip()
    try:
        return datetime.strptime(s[:10], '%Y-%m-%d').date().isoformat()
    except ValueError:
        return None


def build_timesheet_payload(values, personnel, work_type):
    """Tek bir personel için POST /api/timesheets gövdesini hazırlar."""
    overtime_hours = values.get('overtimeHours') if work_type == WORK_TYPE_OVERTIME else None
    result = compute_wage(monthly_salary_for(personnel), work_type, overtime_hours)

    return {
        'personnelId': personnel['id'],
        'customerId': values.get('customerId'),
        'date': to_date_string(values.get('date')) or date.today().isoformat(),
        'workType': work_type,
        'startTime': values.get('startTime') or '08:00',
        'endTime': values.get('endTime') or '17:00',
        'totalHours': str(result['totalHours']),
        'overtimeHours': str(result['totalHours']) if work_type == WORK_TYPE_OVERTIME else '0.00',
        'hourlyRate': str(result['hourlyRate']),
        'dailyWage': str(result['wage']),
        'notes': values.get('notes') or '',
    }


def summarize_account(entries, payments):
    """Personel hesap özeti: puantaj toplamları, ödemeler ve kalan bakiye."""
    total_hours = sum((parse_decimal(e.get('totalHours')) for e in entries), Decimal('0'))
    overtime_hours = sum((parse_decimal(e.get('overtimeHours')) for e in entries), Decimal('0'))
    earnings = sum((parse_decimal(e.get('dailyWage')) for e in entries), Decimal('0'))
    paid = sum((parse_decimal(p.get('amount')) for p in payments), Decimal('0'))

    return {
        'timesheetCount': len(entries),
        'totalHours': format_decimal(total_hours),
        'totalOvertimeHours': format_decimal(overtime_hours),
        'totalEarnings': format_decimal(earnings),
        'totalPayments': format_decimal(paid),
        'balance': format_decimal(earnings - paid),
    }
