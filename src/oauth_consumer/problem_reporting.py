"""
Problem Reporting translation.

Service providers that support the OAuth Problem Reporting extension return
an ``oauth_problem`` code (plus optional advice and parameter lists) in a
WWW-Authenticate header or in a form-encoded body. This module turns such a
report into an ``OAuthProtocolError``. A recognized problem always takes
precedence over the HTTP failure that carried it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from . import constants
from .encoding import percent_decode
from .exceptions import HttpTransportError, MalformedEncodingError, OAuthProtocolError
from .parameters import OAuthParameters
from .transport import HttpResponse

logger = logging.getLogger(__name__)


def _split_names(value: Optional[str]) -> FrozenSet[str]:
    """Decode an '&' separated list of percent-encoded parameter names."""
    if not value:
        return frozenset()

    names = set()
    for name in value.split("&"):
        if not name:
            continue
        try:
            names.add(percent_decode(name))
        except MalformedEncodingError:
            names.add(name)
    return frozenset(names)


@dataclass(frozen=True)
class ProblemReport:
    """
    Problem reported by a service provider.

    Attributes:
        problem: Problem code (e.g. "token_expired")
        advice: Human-readable advice, if given
        parameters_absent: Names of required parameters that were missing
        parameters_rejected: Names of parameters the provider refused
        acceptable_timestamps: "min-max" range sent with timestamp_refused
        acceptable_versions: "min-max" range sent with version_rejected
        extra: Any other parameters returned with the report
    """

    problem: str
    advice: Optional[str] = None
    parameters_absent: FrozenSet[str] = frozenset()
    parameters_rejected: FrozenSet[str] = frozenset()
    acceptable_timestamps: Optional[str] = None
    acceptable_versions: Optional[str] = None
    extra: Dict[str, str] = field(default_factory=dict)

    @property
    def offending_parameters(self) -> FrozenSet[str]:
        return self.parameters_absent | self.parameters_rejected

    @property
    def is_recognized(self) -> bool:
        return self.problem in constants.KNOWN_PROBLEMS

    @classmethod
    def from_parameters(cls, parameters: OAuthParameters) -> Optional["ProblemReport"]:
        """
        Build a report from parsed response parameters.

        Returns:
            ProblemReport, or None if no oauth_problem was returned
        """
        problem = parameters.get(constants.PROBLEM)
        if not problem:
            return None

        extra = {}
        for name, value in parameters.items():
            if name not in constants.PROBLEM_PARAMETERS:
                extra.setdefault(name, value)

        return cls(
            problem=problem,
            advice=parameters.get(constants.PROBLEM_ADVICE),
            parameters_absent=_split_names(parameters.get(constants.PARAMETERS_ABSENT)),
            parameters_rejected=_split_names(parameters.get(constants.PARAMETERS_REJECTED)),
            acceptable_timestamps=parameters.get(constants.ACCEPTABLE_TIMESTAMPS),
            acceptable_versions=parameters.get(constants.ACCEPTABLE_VERSIONS),
            extra=extra,
        )

    def to_error(self) -> OAuthProtocolError:
        return OAuthProtocolError(
            problem=self.problem,
            advice=self.advice,
            parameters=self.offending_parameters,
            report=self,
        )


def raise_for_problem(parameters: OAuthParameters) -> None:
    """
    Raise the provider's problem report, if it carries a recognized one.

    Raises:
        OAuthProtocolError: If a recognized oauth_problem is present
    """
    report = ProblemReport.from_parameters(parameters)
    if report is None:
        return

    if not report.is_recognized:
        logger.warning(f"Ignoring unrecognized OAuth problem code: {report.problem}")
        return

    logger.error(f"Service provider reported OAuth problem: {report.problem}")
    raise report.to_error()


def translate_failure(response: HttpResponse) -> None:
    """
    Translate a non-2xx provider response into an exception.

    The body is read once while looking for a problem report; an unreadable
    body simply means there is no report.

    Raises:
        OAuthProtocolError: If the response carries a recognized problem report
        HttpTransportError: Otherwise
    """
    try:
        parameters = OAuthParameters.from_response(response)
    except MalformedEncodingError as e:
        logger.debug(f"No problem report in {response.status_code} response: {e}")
        parameters = OAuthParameters()

    raise_for_problem(parameters)

    logger.error(f"Service provider returned HTTP {response.status_code}")
    raise HttpTransportError(response.status_code, response.headers, response.reason)
