"""Bastion allow-list validation.

Validates the ``allowedCIDRBlocks`` of a bastion. Unlike update
validation, this check is fail-fast: the first fault raises and no
further entries are examined.

Example:
    >>> from awscluster_admission.schemas import Bastion
    >>> validate_allowed_cidr_blocks(Bastion(allowed_cidr_blocks=["10.0.0.0/8"]))
    >>> validate_allowed_cidr_blocks(Bastion(allowed_cidr_blocks=["abcdefg"]))
    Traceback (most recent call last):
        ...
    CIDRValidationError: CIDR block 'abcdefg' is invalid: missing prefix length
"""

from __future__ import annotations

import ipaddress
import re
from typing import TYPE_CHECKING

import structlog

from awscluster_admission.errors import CIDRValidationError, ConflictingConfigurationError

if TYPE_CHECKING:
    from awscluster_admission.schemas import Bastion

logger = structlog.get_logger(__name__)

_PREFIX_PATTERN = re.compile(r"[0-9]{1,3}")


def parse_cidr_block(
    cidr: str, index: int = 0
) -> ipaddress.IPv4Network | ipaddress.IPv6Network:
    """Parse ``address/prefix`` notation.

    Host bits may be set (``192.168.0.1/32``, ``10.1.2.3/8``). The prefix
    must be a decimal length no larger than the address family's bit
    width; netmask notation and bare addresses are rejected.

    Args:
        cidr: CIDR string to parse.
        index: Position of the entry, recorded on the raised error.

    Returns:
        The network the block denotes.

    Raises:
        CIDRValidationError: If the string is not a valid CIDR block.
    """
    address, sep, prefix = cidr.partition("/")
    if not sep:
        raise CIDRValidationError(cidr, index, "missing prefix length")
    if not _PREFIX_PATTERN.fullmatch(prefix):
        raise CIDRValidationError(cidr, index, f"invalid prefix length {prefix!r}")
    if "%" in address:
        raise CIDRValidationError(cidr, index, "zoned addresses are not allowed")

    try:
        ip = ipaddress.ip_address(address)
    except ValueError as e:
        raise CIDRValidationError(cidr, index, f"invalid IP address {address!r}") from e

    if int(prefix) > ip.max_prefixlen:
        raise CIDRValidationError(
            cidr,
            index,
            f"prefix length {prefix} exceeds {ip.max_prefixlen} bits for IPv{ip.version}",
        )

    return ipaddress.ip_network(f"{ip}/{int(prefix)}", strict=False)


def validate_allowed_cidr_blocks(bastion: Bastion) -> None:
    """Validate a bastion's allow-list, stopping at the first fault.

    Args:
        bastion: Bastion settings to check.

    Raises:
        ConflictingConfigurationError: If ingress rules are disabled while
            CIDR blocks are listed.
        CIDRValidationError: For the first entry that is not a valid CIDR.
    """
    if bastion.disable_ingress_rules and bastion.allowed_cidr_blocks:
        logger.debug(
            "bastion_ingress_conflict",
            cidr_count=len(bastion.allowed_cidr_blocks),
        )
        raise ConflictingConfigurationError()

    for index, cidr in enumerate(bastion.allowed_cidr_blocks):
        try:
            parse_cidr_block(cidr, index)
        except CIDRValidationError as e:
            logger.debug("bastion_cidr_invalid", cidr=cidr, index=index, reason=e.reason)
            raise


__all__ = ["parse_cidr_block", "validate_allowed_cidr_blocks"]
