"""Error types raised by the loan analyzer.

Only contractually invalid input is an error. A loan that does not pay off
within its term is reported on the ``ScheduleResult`` itself (see
``ScheduleResult.fully_amortized``) because it is a valid advisory outcome.
"""


class InvalidInputError(ValueError):
    """Raised when loan terms or plans violate the input contract.

    Examples are a non-positive term, a negative principal, rate or amount, an
    unsupported prepayment frequency or a malformed date.
    """
