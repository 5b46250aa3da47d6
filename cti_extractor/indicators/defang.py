"""
Defanging of indicators for safe display.

Defanged values cannot be clicked or resolved by mail clients, chat tools or
browsers, which keeps analysts from triggering live infrastructure when
copying IoCs around.
"""

import re

_HTTP = re.compile('http', re.IGNORECASE)
_HXXP = re.compile('hxxp', re.IGNORECASE)


def defang(value: str) -> str:
    """
    Make an indicator non-actionable.

    Dots become ``[.]``, ``http`` (any case, so ``https`` too) becomes
    ``hxxp`` and ``@`` becomes ``[at]``. Empty values are returned as is.
    """
    if not value:
        return value

    defanged = value.replace('.', '[.]')
    defanged = _HTTP.sub('hxxp', defanged)
    defanged = defanged.replace('@', '[at]')

    return defanged


def refang(value: str) -> str:
    """
    Reverse defang() on a best-effort basis.

    Not a lossless inverse: a value that already contained ``hxxp``, ``[.]``
    or ``[at]`` before defanging comes back altered.
    """
    if not value:
        return value

    refanged = value.replace('[.]', '.')
    refanged = _HXXP.sub('http', refanged)
    refanged = refanged.replace('[at]', '@')

    return refanged
