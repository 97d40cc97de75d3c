"""Recover an organization-ish word from a hostname.

``apply.careers.microsoft.com`` → ``microsoft``,
``company.greenhouse.io`` → ``company``, ``jobs.lever.co`` → ``lever``.
"""

from __future__ import annotations

# Labels that say nothing about the organization.
GENERIC_LABELS = frozenset(
    {"www", "jobs", "job", "careers", "career", "apply", "boards", "job-boards", "work"}
)

# Applicant-tracking and job-board base domains.  A label in front of one of
# these names the hiring company; the base domain alone names the platform.
ATS_DOMAINS = (
    "lever.co",
    "greenhouse.io",
    "ashbyhq.com",
    "myworkdayjobs.com",
    "workday.com",
    "smartrecruiters.com",
    "workable.com",
    "bamboohr.com",
    "recruitee.com",
    "jobvite.com",
    "icims.com",
    "breezy.hr",
)

# Two-label public suffixes; the organization sits one label further left.
_TWO_PART_SUFFIXES = frozenset(
    {"co.uk", "org.uk", "ac.uk", "com.au", "net.au", "co.nz", "co.jp", "com.br", "co.in", "com.sg"}
)


def _ipv6_groups(host: str) -> list[str]:
    """Return the non-empty groups of an IPv6 literal, bracketed or not, else ``[]``."""
    if host.startswith("["):
        host = host[1:].split("]", 1)[0]
    elif host.count(":") < 2:
        return []
    return [group for group in host.split(":") if group]


def _split_host(host: str) -> list[str]:
    host = host.split(":", 1)[0].strip(".")
    return [label for label in host.split(".") if label]


def _strip_generic(labels: list[str], keep: int = 0) -> list[str]:
    """Drop generic labels from the left while more than *keep* labels remain."""
    labels = list(labels)
    while len(labels) > keep and labels[0] in GENERIC_LABELS:
        labels.pop(0)
    return labels


def extract_clean_hostname(host: str) -> str:
    """Return the most specific meaningful label of *host*, or ``""``."""
    host = host.strip().lower()
    groups = _ipv6_groups(host)
    if groups:
        return "-".join(groups)

    labels = _split_host(host)
    if not labels:
        return ""

    if all(label.isdigit() for label in labels):
        return "-".join(labels)

    joined = ".".join(labels)
    for domain in ATS_DOMAINS:
        if joined == domain or joined.endswith("." + domain):
            tenant = _strip_generic(labels[: -len(domain.split("."))])
            if tenant:
                return tenant[0]
            return domain.split(".")[0]

    if len(labels) == 1:
        return labels[0]

    suffix_len = 2 if ".".join(labels[-2:]) in _TWO_PART_SUFFIXES else 1
    name_labels = _strip_generic(labels[:-suffix_len], keep=1)
    if not name_labels:
        return labels[0]
    return name_labels[-1]
