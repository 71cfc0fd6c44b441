"""Authorization capability checks shared by every service.

Ownership rules are expressed as named relations between an actor and a
resource instead of ad hoc id comparisons in each handler:

- ``owner``: ``resource.owner_id`` (stores, gigs)
- ``buyer``: ``resource.buyer_id``
- ``seller``: ``resource.seller_id`` or ``resource.supplier_id``
- ``store_owner``: ``resource.store.owner_id`` (warehouses, product orders)
- ``party``: any of buyer, seller or store owner
"""

from rest_framework.permissions import BasePermission

from .exceptions import AuthorizationError

OWNER = "owner"
BUYER = "buyer"
SELLER = "seller"
STORE_OWNER = "store_owner"
PARTY = "party"


def _owner_ids(resource):
    return [getattr(resource, "owner_id", None)]


def _buyer_ids(resource):
    return [getattr(resource, "buyer_id", None)]


def _seller_ids(resource):
    return [getattr(resource, "seller_id", None), getattr(resource, "supplier_id", None)]


def _store_owner_ids(resource):
    store = getattr(resource, "store", None)
    return [getattr(store, "owner_id", None)]


def _party_ids(resource):
    return _buyer_ids(resource) + _seller_ids(resource) + _store_owner_ids(resource)


_RESOLVERS = {
    OWNER: _owner_ids,
    BUYER: _buyer_ids,
    SELLER: _seller_ids,
    STORE_OWNER: _store_owner_ids,
    PARTY: _party_ids,
}


def has_relation(actor, resource, *relations: str) -> bool:
    """Return True when the actor holds any of the given relations to the resource."""

    actor_id = getattr(actor, "id", None)
    if actor_id is None:
        return False
    for relation in relations:
        try:
            resolver = _RESOLVERS[relation]
        except KeyError:
            raise ValueError(f"Unknown relation: {relation}")
        if actor_id in [i for i in resolver(resource) if i is not None]:
            return True
    return False


def authorize(actor, resource, *relations: str, detail: str | None = None) -> None:
    """Raise AuthorizationError unless the actor holds one of the relations."""

    if not has_relation(actor, resource, *relations):
        raise AuthorizationError(detail)


class IsSeller(BasePermission):
    """Allow only authenticated accounts carrying the seller capability."""

    message = "Seller account required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_seller", False))
