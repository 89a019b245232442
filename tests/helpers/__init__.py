"""Test helpers.

Usage:
    from tests.helpers import ref_pow, ref_weighted_out_given_in
    # or
    from tests.helpers.reference import ref_pow
"""

from tests.helpers.reference import (
    ONE_18,
    REFERENCE_PRECISION,
    ref_exp,
    ref_ln,
    ref_log2,
    ref_pow,
    ref_weighted_in_given_out,
    ref_weighted_out_given_in,
    to_fixed_decimal,
)

__all__ = [
    "ONE_18",
    "REFERENCE_PRECISION",
    "ref_exp",
    "ref_ln",
    "ref_log2",
    "ref_pow",
    "ref_weighted_in_given_out",
    "ref_weighted_out_given_in",
    "to_fixed_decimal",
]
