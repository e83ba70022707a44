import requests


class NotificationError(Exception):
    """The SMS provider did not accept the message."""


class SmsNotifier:
    """Sends the login code through the httpSMS API.

    One attempt, bounded by ``timeout``; every transport problem is turned
    into ``NotificationError`` so callers always get a yes or a no.
    """

    def __init__(self, api_url, api_key, sender, country_code='+91', timeout=10.0):
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.country_code = country_code
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            api_url=config.get('SMS_API_URL'),
            api_key=config.get('HTTPSMS_APIKEY'),
            sender=config.get('PHONE_NUMBER'),
            country_code=config.get('SMS_COUNTRY_CODE', '+91'),
            timeout=float(config.get('SMS_TIMEOUT_SEC', 10)),
        )

    def send_code(self, phone_number: int, code: str) -> None:
        payload = {
            'content': f"{code} is your OTP\n- Team CodeX",
            'encrypted': False,
            'from': f"{self.country_code}{self.sender}",
            'to': f"{self.country_code}{phone_number}",
        }
        headers = {'x-api-key': self.api_key, 'content-type': 'application/json'}
        try:
            resp = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise NotificationError(f"SMS request failed: {exc}") from exc
        if not isinstance(data, dict) or data.get('status') != 'success':
            raise NotificationError(f"SMS provider rejected message: status={resp.status_code}")
