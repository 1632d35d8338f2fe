from decimal import Decimal, InvalidOperation

ONES = ['', 'One', 'Two', 'Three', 'Four', 'Five', 'Six', 'Seven', 'Eight', 'Nine']
TEENS = ['Ten', 'Eleven', 'Twelve', 'Thirteen', 'Fourteen', 'Fifteen', 'Sixteen',
         'Seventeen', 'Eighteen', 'Nineteen']
TENS = ['', '', 'Twenty', 'Thirty', 'Forty', 'Fifty', 'Sixty', 'Seventy', 'Eighty', 'Ninety']
SCALES = ['', 'Thousand', 'Million', 'Billion', 'Trillion']


def _convert_hundreds(n):
    words = []
    if n >= 100:
        words.append(f'{ONES[n // 100]} Hundred')
        n %= 100
    if 10 <= n < 20:
        words.append(TEENS[n - 10])
        return ' '.join(words)
    if n >= 20:
        words.append(TENS[n // 10])
        n %= 10
    if n > 0:
        words.append(ONES[n])
    return ' '.join(words)


def number_to_words(amount):
    """
    Spell the integer part of an amount in English words.

    >>> number_to_words(1250000)
    'One Million Two Hundred Fifty Thousand'

    None, blanks and non-numbers give ''. Fractions are dropped.
    """
    if amount is None or amount == '':
        return ''
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return ''
    if not value.is_finite():
        return ''

    num = int(value)
    if num == 0:
        return 'Zero'
    if num < 0:
        return 'Negative ' + number_to_words(-num)

    chunks = []
    scale_index = 0
    while num > 0:
        chunk = num % 1000
        if chunk:
            if scale_index >= len(SCALES):
                raise ValueError('Amount is too large to spell out')
            words = _convert_hundreds(chunk)
            if SCALES[scale_index]:
                words = f'{words} {SCALES[scale_index]}'
            chunks.append(words)
        num //= 1000
        scale_index += 1

    return ' '.join(reversed(chunks))
