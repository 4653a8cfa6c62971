"""
The device a driver runs against. In the sandbox the device is described by environment variables
rather than by the host's inventory.
"""
import os

from driversandbox.support.mixins import CommonEqualityMixin

DEVICE_IP = 'DEVICE_IP'
DEVICE_USERNAME = 'DEVICE_USERNAME'
DEVICE_PASSWORD = 'DEVICE_PASSWORD'


class DeviceInfo(CommonEqualityMixin):
    """
    The address and credentials of the device being polled.
    """

    def __init__(self, ip=None, username=None, password=None):
        self._ip = ip
        self._username = username
        self._password = password

    def ip(self):
        return self._ip

    def username(self):
        return self._username

    def password(self):
        return self._password

    def __str__(self):
        return 'DeviceInfo:{ip: %s, username: %s}' % (self._ip, self._username)


def device_from_environ(environ=None) -> DeviceInfo:
    """
    Builds the device from the DEVICE_IP, DEVICE_USERNAME and DEVICE_PASSWORD variables.
    Credentials are only set when a username is given.
    """
    environ = os.environ if environ is None else environ
    username = environ.get(DEVICE_USERNAME) or None
    password = environ.get(DEVICE_PASSWORD) if username else None
    return DeviceInfo(environ.get(DEVICE_IP), username, password)


def external_device(host, credentials=None) -> DeviceInfo:
    """
    Builds a device for a host other than the one the driver runs against.
    :param credentials: a mapping with optional `username` and `password`
    """
    credentials = credentials or {}
    return DeviceInfo(host, credentials.get('username'), credentials.get('password'))
