from dataclasses import dataclass
from typing import Literal

from allocator.constants import WEIGHT_SCALE

@dataclass
class ValidationFeedback:
    feedback: str
    result: Literal["pass", "fail"]

    @property
    def passed(self) -> bool:
        return self.result == 'pass'

PASS = ValidationFeedback(feedback='', result='pass')

def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

def validate_weights(weight_a: int, weight_b: int) -> ValidationFeedback:
    for weight in (weight_a, weight_b):
        if not _is_int(weight):
            return ValidationFeedback(
                feedback=f'The weight ({weight!r}) should be an integer.',
                result='fail'
            )
        if weight < 0 or weight > WEIGHT_SCALE:
            return ValidationFeedback(
                feedback=f'The weight ({weight}) should be between 0 and {WEIGHT_SCALE}.',
                result='fail'
            )
    if weight_a + weight_b != WEIGHT_SCALE:
        return ValidationFeedback(
            feedback=f'Sum of weights ({weight_a + weight_b}) should equal to {WEIGHT_SCALE}.',
            result='fail'
        )
    return PASS

def validate_amount(amount: int) -> ValidationFeedback:
    if not _is_int(amount):
        return ValidationFeedback(
            feedback=f'The amount ({amount!r}) should be an integer number of units.',
            result='fail'
        )
    if amount <= 0:
        return ValidationFeedback(
            feedback=f'The amount ({amount}) should be greater than 0.',
            result='fail'
        )
    return PASS

def validate_pool_ids(pool_ids: tuple[str, ...]) -> ValidationFeedback:
    if len(pool_ids) != 2:
        return ValidationFeedback(
            feedback=f'Exactly two verified pools are required, got {len(pool_ids)}.',
            result='fail'
        )
    for pool_id in pool_ids:
        if not isinstance(pool_id, str) or not pool_id:
            return ValidationFeedback(
                feedback=f'The pool identifier ({pool_id!r}) should be a non-empty string.',
                result='fail'
            )
    if pool_ids[0] == pool_ids[1]:
        return ValidationFeedback(
            feedback=f'The verified pools should be distinct, got {pool_ids[0]} twice.',
            result='fail'
        )
    return PASS

def validate_transfer(from_pool: str, to_pool: str, amount: int, balances: dict[str, int]) -> ValidationFeedback:
    feedback = validate_amount(amount)
    if not feedback.passed:
        return feedback
    for pool_id in (from_pool, to_pool):
        if pool_id not in balances:
            return ValidationFeedback(
                feedback=f'Cannot transfer with {pool_id} because it is not a verified pool.',
                result='fail'
            )
    if from_pool == to_pool:
        return ValidationFeedback(
            feedback=f'Cannot transfer from {from_pool} to itself.',
            result='fail'
        )
    if amount > balances[from_pool]:
        return ValidationFeedback(
            feedback=f'The transfer amount ({amount}) of {from_pool} cannot exceed the balance ({balances[from_pool]})',
            result='fail'
        )
    return PASS

def validate_deposit(amount: int, balance: int, allowance: int) -> ValidationFeedback:
    if balance < amount:
        return ValidationFeedback(
            feedback=f'The deposit amount ({amount}) cannot exceed the depositor balance ({balance})',
            result='fail'
        )
    if allowance < amount:
        return ValidationFeedback(
            feedback=f'The deposit amount ({amount}) cannot exceed the approved allowance ({allowance})',
            result='fail'
        )
    return PASS
