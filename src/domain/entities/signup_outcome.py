"""
Google signup outcome

Signup either issues tokens or asks the caller to complete the profile
(no account yet and no password supplied). Both are terminal, non-error
results and are modelled as a two-variant tagged union.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import SignupOutcomeKind
from .tokens import AuthTokens


class TokensIssued(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal[SignupOutcomeKind.tokens] = SignupOutcomeKind.tokens
    tokens: AuthTokens


class NeedsProfileCompletion(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal[SignupOutcomeKind.needs_profile_completion] = (
        SignupOutcomeKind.needs_profile_completion
    )
    email: str


SignupOutcome = Annotated[
    Union[TokensIssued, NeedsProfileCompletion], Field(discriminator="kind")
]
