from datetime import date

import services

MODE_CREATE = 'create'
MODE_EDIT = 'edit'


def default_form_values():
    """Her çağrıda yeni bir varsayılan form sözlüğü döner."""
    return {
        'personnelId': '',
        'customerId': '',
        'date': date.today().isoformat(),
        'workType': services.WORK_TYPE_FULL,
        'startTime': '08:00',
        'endTime': '17:00',
        'totalHours': '8.00',
        'overtimeHours': '0.00',
        'hourlyRate': '0.00',
        'dailyWage': '0.00',
        'notes': '',
    }


def _display_number(value, fallback):
    if value is None or value == '':
        return fallback
    parsed = services.parse_decimal(value, None)
    if parsed is None:
        return fallback
    return services.format_decimal(parsed)


def values_from_entry(entry):
    """Kayıtlı puantajı form alanlarına çevirir (sayılar '0.00', tarih YYYY-MM-DD)."""
    defaults = default_form_values()
    return {
        'personnelId': entry.get('personnelId') or defaults['personnelId'],
        'customerId': entry.get('customerId') or defaults['customerId'],
        'date': services.to_date_string(entry.get('date')) or defaults['date'],
        'workType': entry.get('workType') or defaults['workType'],
        'startTime': entry.get('startTime') or defaults['startTime'],
        'endTime': entry.get('endTime') or defaults['endTime'],
        'totalHours': _display_number(entry.get('totalHours'), defaults['totalHours']),
        'overtimeHours': _display_number(entry.get('overtimeHours'), defaults['overtimeHours']),
        'hourlyRate': _display_number(entry.get('hourlyRate'), defaults['hourlyRate']),
        'dailyWage': _display_number(entry.get('dailyWage'), defaults['dailyWage']),
        'notes': entry.get('notes') or defaults['notes'],
    }


class TimesheetForm:
    """
    Puantaj formu durumu. Tek form, iki mod:
    - create: çoklu personel seçimi, her personel için ayrı kayıt
    - edit: tek kayıt, personel sabit
    Mod değişiminde geçici seçim durumu tamamen sıfırlanır.
    """

    def __init__(self):
        self.is_open = False
        self.reset()

    def reset(self):
        self.mode = MODE_CREATE
        self.editing_entry = None
        self.selected_personnel_ids = []
        self.work_type = services.WORK_TYPE_FULL
        self.show_personnel_dropdown = False
        self.values = default_form_values()

    def open(self, editing_entry=None):
        self.reset()
        if editing_entry is not None:
            self.mode = MODE_EDIT
            self.editing_entry = editing_entry
            self.values = values_from_entry(editing_entry)
            self.work_type = self.values['workType']
            if self.values['personnelId'] != '':
                self.selected_personnel_ids = [self.values['personnelId']]
        self.is_open = True

    def close(self):
        self.reset()
        self.is_open = False

    @property
    def is_editing(self):
        return self.mode == MODE_EDIT

    def toggle_personnel(self, personnel_id):
        if personnel_id in self.selected_personnel_ids:
            self.selected_personnel_ids = [i for i in self.selected_personnel_ids if i != personnel_id]
        else:
            self.selected_personnel_ids = self.selected_personnel_ids + [personnel_id]

    def remove_personnel(self, personnel_id):
        self.selected_personnel_ids = [i for i in self.selected_personnel_ids if i != personnel_id]

    def toggle_dropdown(self):
        self.show_personnel_dropdown = not self.show_personnel_dropdown

    def set_work_type(self, work_type):
        if work_type not in services.WORK_TYPES:
            raise ValueError(f'Bilinmeyen çalışma şekli: {work_type!r}')
        self.work_type = work_type
        self.values['workType'] = work_type

    def update(self, **values):
        unknown = set(values) - set(self.values)
        if unknown:
            raise KeyError(f'Bilinmeyen form alanı: {", ".join(sorted(unknown))}')
        if 'workType' in values:
            self.set_work_type(values.pop('workType'))
        self.values.update(values)

    def validate(self):
        return services.validate_selection(
            self.selected_personnel_ids,
            self.values.get('customerId'),
            self.work_type,
            self.values.get('overtimeHours'),
            editing_entry=self.editing_entry,
        )

    def selection_label(self):
        if self.selected_personnel_ids:
            return f'{len(self.selected_personnel_ids)} personel seçildi'
        return 'Personel seçin'
