from __future__ import annotations


class Member:
    """A registered library member. Members are never changed after registration."""

    def __init__(self, member_id: str, name: str, email: str, phone: str) -> None:
        self.member_id = member_id
        self.name = name
        self.email = email
        self.phone = phone

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"ID: {self.member_id:<8} Name: {self.name:<20} Email: {self.email:<25} Phone: {self.phone}"

    def to_dict(self) -> dict:
        return {"member_id": self.member_id, "name": self.name, "email": self.email, "phone": self.phone}

    @staticmethod
    def from_dict(data: dict) -> "Member":
        return Member(member_id=data["member_id"], name=data["name"], email=data["email"], phone=data["phone"])
