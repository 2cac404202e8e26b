"""EmailAddress value object for validated email addresses."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from clubsupply.domain import clubsupply


@clubsupply.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one @, non-empty local and domain parts, a dotted domain (or an
    address literal in brackets), no consecutive dots and no whitespace or
    forbidden punctuation.
    """

    address: String(required=True, max_length=254, sanitize=False)

    @invariant.post
    def verify_email_address(self):
        email = self.address

        def invalid():
            return ValidationError({"address": [f"Invalid email address: {email!r}"]})

        if any(ch.isspace() for ch in email):
            raise invalid()

        if email.count("@") != 1:
            raise invalid()

        local_part, domain_part = email.split("@", 1)
        literal = domain_part.startswith("[") and domain_part.endswith("]")

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid()

        if not domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid()

        if not literal:
            if "." not in domain_part:
                raise invalid()
            for label in domain_part.split("."):
                if label.startswith("-") or label.endswith("-"):
                    raise invalid()

        if ".." in local_part or ".." in domain_part:
            raise invalid()

        for forbidden in (";", ",", "(", ")", '"', ":", "<", ">", "[", "]", "\\"):
            if forbidden in email and not (forbidden in "[]" and literal):
                raise invalid()
