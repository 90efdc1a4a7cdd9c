"""Validator lifecycle statuses as reported to API consumers.

The status is derived on every query from the validator record and the
epochs of the state it was read from. It is never stored.
"""

from typing import Protocol

import msgspec

from spec.constants import EPOCHS_BEFORE_FINALITY, FAR_FUTURE_EPOCH


class ValidatorRecord(Protocol):
    activation_eligibility_epoch: int
    activation_epoch: int
    exit_epoch: int
    withdrawable_epoch: int

    def is_active_at(self, epoch: int) -> bool: ...

    def is_exited_at(self, epoch: int) -> bool: ...

    def is_withdrawable_at(self, epoch: int) -> bool: ...


class ValidatorStatus(msgspec.Struct, frozen=True, tag_field="status"):
    pass


class Unknown(ValidatorStatus, frozen=True, tag="unknown"):
    pass


class WaitingForEligibility(
    ValidatorStatus, frozen=True, tag="waiting_for_eligibility"
):
    pass


class WaitingForFinality(ValidatorStatus, frozen=True, tag="waiting_for_finality"):
    # Estimated epoch at which the validator enters the activation queue
    epoch: int


class WaitingInQueue(ValidatorStatus, frozen=True, tag="waiting_in_queue"):
    pass


class StandbyForActive(ValidatorStatus, frozen=True, tag="standby_for_active"):
    # Scheduled activation epoch
    epoch: int


class Active(ValidatorStatus, frozen=True, tag="active"):
    pass


class ActiveAwaitingExit(ValidatorStatus, frozen=True, tag="active_awaiting_exit"):
    # Scheduled exit epoch
    epoch: int


class Exited(ValidatorStatus, frozen=True, tag="exited"):
    # Epoch at which the validator becomes withdrawable
    epoch: int


class Withdrawable(ValidatorStatus, frozen=True, tag="withdrawable"):
    pass


AnyValidatorStatus = (
    Unknown
    | WaitingForEligibility
    | WaitingForFinality
    | WaitingInQueue
    | StandbyForActive
    | Active
    | ActiveAwaitingExit
    | Exited
    | Withdrawable
)

PENDING_STATUSES = (
    WaitingForEligibility,
    WaitingForFinality,
    WaitingInQueue,
    StandbyForActive,
)
ACTIVE_STATUSES = (Active, ActiveAwaitingExit)


def get_validator_status(
    validator: ValidatorRecord | None,
    epoch: int,
    finalized_epoch: int,
    far_future_epoch: int = FAR_FUTURE_EPOCH,
    epochs_before_finality: int = EPOCHS_BEFORE_FINALITY,
) -> ValidatorStatus:
    """
    Classifies a validator at `epoch`.

    The checks are evaluated in order and the first one that holds wins:
    withdrawable, exited, active, then the pending states. A validator
    that would match more than one check is always reported with the
    earliest one.

    Any epoch field still equal to `far_future_epoch` counts as unscheduled.
    """
    if validator is None:
        return Unknown()

    if validator.is_withdrawable_at(epoch):
        return Withdrawable()

    if validator.is_exited_at(epoch):
        return Exited(epoch=int(validator.withdrawable_epoch))

    if validator.is_active_at(epoch):
        if validator.exit_epoch < far_future_epoch:
            return ActiveAwaitingExit(epoch=int(validator.exit_epoch))
        return Active()

    if validator.activation_epoch < far_future_epoch:
        return StandbyForActive(epoch=int(validator.activation_epoch))

    if validator.activation_eligibility_epoch < far_future_epoch:
        if finalized_epoch < validator.activation_eligibility_epoch:
            return WaitingForFinality(
                epoch=int(validator.activation_eligibility_epoch)
                + epochs_before_finality
            )
        return WaitingInQueue()

    return WaitingForEligibility()
