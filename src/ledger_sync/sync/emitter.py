#!/usr/bin/env python3
"""
Create-Command Emitter

Builds create commands for unmatched transactions, resolves their category
names against the destination catalog and asks the destination to create them.

An unknown category is fatal, including the classifier's default pairs;
there is no fallback category.
"""

import logging

from ..core.currency import format_yen
from ..core.models import CanonicalTransaction, CategoryCatalog, CreateCommand
from .errors import CategoryNotFoundError, CreateEntryError
from .protocols import DestinationLedger

logger = logging.getLogger(__name__)


def build_command(wallet_id: str, transaction: CanonicalTransaction) -> CreateCommand:
    """
    Build the create command for an unmatched transaction.

    Raises:
        ValueError: If the transaction carries no category
    """
    if transaction.category is None:
        raise ValueError(f"Transaction on {transaction.date} has no category: {transaction.description}")
    return CreateCommand(
        wallet_id=wallet_id,
        direction=transaction.direction,
        date=transaction.date,
        description=transaction.description,
        amount=transaction.magnitude,
        large_category=transaction.category.large,
        medium_category=transaction.category.medium,
    )


def resolve_category_ids(catalog: CategoryCatalog, command: CreateCommand) -> tuple[int, int]:
    """
    Resolve the command's category names to destination ids.

    Returns:
        (large_category_id, medium_category_id)

    Raises:
        CategoryNotFoundError: If either name is unknown in the command's scope
    """
    scope = command.direction.value
    large = catalog.find_large(command.direction, command.large_category)
    if large is None:
        raise CategoryNotFoundError(
            f"Invalid {scope} category, large_category: {command.large_category} not found"
        )
    medium = catalog.find_medium(command.direction, large.id, command.medium_category)
    if medium is None:
        raise CategoryNotFoundError(
            f"Invalid {scope} category, medium_category: {command.medium_category} not found"
        )
    return large.id, medium.id


class CommandEmitter:
    """Sends create commands to the destination ledger."""

    def __init__(self, destination: DestinationLedger, catalog: CategoryCatalog, dry_run: bool = False):
        """
        Initialize the emitter.

        Args:
            destination: Destination collaborator
            catalog: Category catalog fetched for this run
            dry_run: Resolve categories but never call ``create_entry``
        """
        self.destination = destination
        self.catalog = catalog
        self.dry_run = dry_run

    def emit(self, command: CreateCommand) -> None:
        """
        Create the entry described by ``command``.

        Raises:
            CategoryNotFoundError: If the categories cannot be resolved
            CreateEntryError: If the destination rejects the entry
        """
        large_id, medium_id = resolve_category_ids(self.catalog, command)

        if self.dry_run:
            logger.info(
                "[dry run] Would create %s entry on %s for %s: %s",
                command.direction.value,
                command.date.isoformat(),
                format_yen(command.amount),
                command.description,
            )
            return

        created = self.destination.create_entry(
            command.wallet_id,
            command.direction,
            command.date,
            command.signed_amount,
            large_id,
            medium_id,
            command.description,
        )
        if not created:
            raise CreateEntryError(
                f"Failed to create {command.direction.value} entry on {command.date.isoformat()} "
                f"for {format_yen(command.amount)}: {command.description}"
            )
        logger.info(
            "Created %s entry on %s for %s: %s",
            command.direction.value,
            command.date.isoformat(),
            format_yen(command.amount),
            command.description,
        )
