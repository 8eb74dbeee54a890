from netaddr import EUI, NotRegisteredError


def lookup_vendor(bssid: str) -> str | None:
    """
    Производитель радиомодуля по OUI из базы IEEE (поставляется с netaddr).
    None, если префикс не зарегистрирован (например, локально
    администрируемый MAC). Некорректный адрес поднимает AddrFormatError.
    """
    try:
        return EUI(bssid).oui.registration().org
    except NotRegisteredError:
        return None
