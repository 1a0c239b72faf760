"""Static user registry"""

from typing import Iterable, Iterator, List, Tuple

from pruefungsplaner_auth.models import User


class UserRegistry:
    """Ordered, read-only collection of configured users

    Users are kept in configuration file order. Duplicate names are stored
    as given; lookup returns the first one.
    """

    def __init__(self, users: Iterable[User] = ()):
        self._users: Tuple[User, ...] = tuple(users)

    def lookup(self, name: str) -> User:
        """
        Get the user with the given name

        Args:
            name: Exact user name

        Returns:
            The first configured user with that name, or User.unknown(name),
            which has no claims and fails every password check
        """
        for user in self._users:
            if user.name == name:
                return user
        return User.unknown(name)

    def names(self) -> List[str]:
        return [user.name for user in self._users]

    def __iter__(self) -> Iterator[User]:
        return iter(self._users)

    def __len__(self) -> int:
        return len(self._users)

    def __repr__(self) -> str:
        return f"UserRegistry(users={self.names()!r})"
