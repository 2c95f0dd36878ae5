import http.client
import json
import logging
import threading
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from enum import Enum

import config
import services

logger = logging.getLogger(__name__)

TIMESHEETS_KEY = '/api/timesheets'
PERSONNEL_KEY = '/api/personnel'
CUSTOMERS_KEY = '/api/customers'

MSG_PERSONNEL_NOT_FOUND = 'Personel bulunamadı.'


class ApiError(Exception):
    """API isteği başarısız oldu (HTTP hata kodu veya bağlantı hatası)."""

    def __init__(self, status, message):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self):
        if self.status:
            return f'{self.status}: {self.message}'
        return self.message


class QueryCache:
    """GET yanıtları için anahtar bazlı basit önbellek."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def get_or_fetch(self, key, fetch):
        with self._lock:
            if key in self._data:
                return self._data[key]
        value = fetch()
        with self._lock:
            self._data[key] = value
        return value

    def invalidate(self, key):
        # '/api/timesheets' anahtarı '/api/timesheets/personnel/3' gibi alt anahtarları da düşürür
        with self._lock:
            for k in list(self._data):
                if k == key or k.startswith(key + '/') or k.startswith(key + '?'):
                    del self._data[k]

    def __contains__(self, key):
        with self._lock:
            return key in self._data


class ApiClient:
    """puantropls JSON API istemcisi."""

    def __init__(self, base_url=None, timeout=None, cache=None):
        self.base_url = (base_url or config.API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else config.API_TIMEOUT
        self.cache = cache if cache is not None else QueryCache()

    def request(self, method, path, payload=None):
        data = None
        headers = {'Accept': 'application/json'}
        if payload is not None:
            data = json.dumps(payload).encode('utf-8')
            headers['Content-Type'] = 'application/json'
        req = urllib.request.Request(self.base_url + path, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode('utf-8')
                return json.loads(body) if body else None
        except urllib.error.HTTPError as e:
            message = e.reason
            try:
                message = json.loads(e.read().decode('utf-8')).get('message') or message
            except (ValueError, AttributeError):
                pass
            raise ApiError(e.code, message) from e
        except urllib.error.URLError as e:
            raise ApiError(None, str(e.reason)) from e
        except (OSError, http.client.HTTPException) as e:
            # Yanıt okunurken kopan bağlantı, zaman aşımı
            raise ApiError(None, str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise ApiError(None, f'Geçersiz JSON yanıtı: {e}') from e

    def get(self, path):
        return self.cache.get_or_fetch(path, lambda: self.request('GET', path))

    def invalidate(self, key):
        self.cache.invalidate(key)

    def list_personnel(self):
        return self.get(PERSONNEL_KEY)

    def refresh_personnel(self):
        """Personel listesini sunucudan yeniden okur ve önbelleği günceller."""
        self.invalidate(PERSONNEL_KEY)
        return self.list_personnel()

    def list_customers(self):
        return self.get(CUSTOMERS_KEY)

    def list_timesheets(self):
        return self.get(TIMESHEETS_KEY)

    def create_timesheet(self, payload):
        return self.request('POST', TIMESHEETS_KEY, payload)

    def update_timesheet(self, entry_id, payload):
        return self.request('PUT', f'{TIMESHEETS_KEY}/{entry_id}', payload)


class SubmitState(str, Enum):
    IDLE = 'idle'
    VALIDATING = 'validating'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    PARTIALLY_FAILED = 'partially_failed'
    FAILED = 'failed'


class ItemResult:
    def __init__(self, personnel_id, ok, entry=None, error=None):
        self.personnel_id = personnel_id
        self.ok = ok
        self.entry = entry
        self.error = error

    def __repr__(self):
        return f"<ItemResult {self.personnel_id} {'ok' if self.ok else self.error}>"


class SubmitResult:
    def __init__(self, state, message, items=None, requests_issued=0):
        self.state = state
        self.message = message
        self.items = items or []
        self.requests_issued = requests_issued

    @property
    def succeeded(self):
        return [i for i in self.items if i.ok]

    @property
    def failed(self):
        return [i for i in self.items if not i.ok]

    def __repr__(self):
        return f"<SubmitResult {self.state.value} {len(self.succeeded)}/{len(self.items)}>"


class TimesheetSubmitter:
    """
    Puantaj formunu gönderir.

    Yeni kayıt modunda seçili her personel için ücret hesaplanır ve
    istekler aynı anda gönderilir; tüm sonuçlar beklenir ve personel bazında
    raporlanır. Düzenleme modunda tek bir güncelleme isteği gönderilir.
    Gönderim sürerken ikinci bir gönderim kabul edilmez.
    """

    def __init__(self, api):
        self.api = api
        self.state = SubmitState.IDLE
        self.last_result = None
        self._lock = threading.Lock()

    @property
    def is_pending(self):
        return self.state in (SubmitState.VALIDATING, SubmitState.SUBMITTING)

    def submit(self, form):
        with self._lock:
            if self.is_pending:
                logger.warning('Gönderim zaten devam ediyor, yeni istek yok sayıldı.')
                return None
            self.state = SubmitState.VALIDATING

        try:
            ok, message = form.validate()
            if not ok:
                result = SubmitResult(SubmitState.FAILED, message)
            else:
                self.state = SubmitState.SUBMITTING
                if form.is_editing:
                    result = self._submit_edit(form)
                else:
                    result = self._submit_create(form)
                if result.requests_issued:
                    self.api.invalidate(TIMESHEETS_KEY)
                if result.state == SubmitState.SUCCEEDED:
                    form.close()
        finally:
            self.state = SubmitState.IDLE

        self.last_result = result
        return result

    def _personnel_by_id(self):
        return {p['id']: p for p in self.api.refresh_personnel()}

    def _create_one(self, personnel_id, personnel, values, work_type):
        if personnel is None:
            logger.warning('Seçili personel listede yok: %s', personnel_id)
            return ItemResult(personnel_id, False, error=MSG_PERSONNEL_NOT_FOUND)
        payload = services.build_timesheet_payload(values, personnel, work_type)
        try:
            entry = self.api.create_timesheet(payload)
        except ApiError as e:
            logger.error('Puantaj oluşturulamadı (personel %s): %s', personnel_id, e)
            return ItemResult(personnel_id, False, error=str(e))
        return ItemResult(personnel_id, True, entry=entry)

    def _submit_create(self, form):
        try:
            personnel = self._personnel_by_id()
        except ApiError as e:
            logger.error('Personel listesi alınamadı: %s', e)
            return SubmitResult(SubmitState.FAILED, 'Puantaj kayıtları oluşturulamadı.',
                                [ItemResult(pid, False, error=str(e)) for pid in form.selected_personnel_ids])

        selected = list(dict.fromkeys(form.selected_personnel_ids))
        values = dict(form.values)
        work_type = form.work_type
        issued = sum(1 for pid in selected if pid in personnel)

        with ThreadPoolExecutor(max_workers=len(selected)) as executor:
            futures = [
                executor.submit(self._create_one, pid, personnel.get(pid), values, work_type)
                for pid in selected
            ]
            items = [f.result() for f in futures]

        created = sum(1 for i in items if i.ok)
        failed = len(items) - created
        if failed == 0:
            state = SubmitState.SUCCEEDED
            message = f'{created} personel için puantaj kaydı oluşturuldu.'
        elif created:
            state = SubmitState.PARTIALLY_FAILED
            message = f'{created} personel için puantaj kaydı oluşturuldu, {failed} kayıt oluşturulamadı.'
        else:
            state = SubmitState.FAILED
            message = 'Puantaj kayıtları oluşturulamadı.'
        return SubmitResult(state, message, items, requests_issued=issued)

    def _submit_edit(self, form):
        entry = form.editing_entry
        personnel_id = entry.get('personnelId')
        values = dict(form.values)

        try:
            person = self._personnel_by_id().get(personnel_id)
        except ApiError as e:
            logger.warning('Personel listesi alınamadı, form değerleri kullanılacak: %s', e)
            person = None

        if person is not None:
            payload = services.build_timesheet_payload(values, person, form.work_type)
        else:
            payload = dict(values)
            payload['personnelId'] = personnel_id
            payload['workType'] = form.work_type

        try:
            updated = self.api.update_timesheet(entry['id'], payload)
        except ApiError as e:
            logger.error('Puantaj güncellenemedi (%s): %s', entry['id'], e)
            return SubmitResult(SubmitState.FAILED, 'Puantaj kaydı güncellenemedi.',
                                [ItemResult(personnel_id, False, error=str(e))], requests_issued=1)
        return SubmitResult(SubmitState.SUCCEEDED, 'Puantaj kaydı güncellendi.',
                            [ItemResult(personnel_id, True, entry=updated)], requests_issued=1)
