from typing import Optional

from fractal.core.base.entity import EntityException


class AllocatorEntityException(EntityException):
    """
    Base exception for errors raised by the allocator entities.
    """


class ConfigurationError(AllocatorEntityException):
    """
    Raised when an allocator configuration is invalid.
    """


class Unauthorized(AllocatorEntityException):
    """
    Raised when a non-owner caller invokes an administrative operation.
    """


class InvalidWeights(AllocatorEntityException):
    """
    Raised when target weights are out of range or do not sum to 100.
    """


class NoOpUpdate(AllocatorEntityException):
    """
    Raised when new target weights are identical to the current ones.
    """


class DuplicatePool(AllocatorEntityException):
    """
    Raised when a pool is whitelisted twice.
    """


class UnverifiedPool(AllocatorEntityException):
    """
    Raised when the ledger is asked to account for a pool that is not verified.
    """


class InvalidPool(AllocatorEntityException):
    """
    Raised when a deposit targets a pool that is not one of the verified pools.
    """


class InvalidAmount(AllocatorEntityException):
    """
    Raised when an amount is not a positive integer.
    """


class InsufficientFunds(AllocatorEntityException):
    """
    Raised when a depositor has not provided or approved enough of the underlying asset.
    """


class InsufficientLiquidity(AllocatorEntityException):
    """
    Raised when a pool's ledger balance cannot cover a transfer.
    """


class WithdrawalFailed(AllocatorEntityException):
    """
    Raised when a pool service refuses a withdrawal.
    """


class DepositFailed(AllocatorEntityException):
    """
    Raised when a pool service refuses a deposit.
    """


class StrandedFundsAfterPartialRebalance(DepositFailed):
    """
    Raised when funds were withdrawn from one pool but could not be deposited into the other.

    ``amount`` is held by the allocator outside of any pool and needs manual
    recovery. ``requested`` is what left ``from_pool``. It is never retried
    automatically.
    """

    def __init__(self, message: str, amount: int, from_pool: str, to_pool: str, requested: Optional[int] = None):
        super().__init__(message)
        self.amount = amount
        self.from_pool = from_pool
        self.to_pool = to_pool
        self.requested = amount if requested is None else requested


class PoolServiceException(EntityException):
    """
    Raised by a pool service when it cannot fulfil a request.
    """


class CustodyException(EntityException):
    """
    Raised by the custody layer when a transfer cannot be made.
    """
