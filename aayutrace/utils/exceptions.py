from typing import Any, Optional


class StaleReferenceError(Exception):
    """
    La ressource visée n'existe plus (ou n'est plus accessible)

    Exemples : modification d'un produit supprimé, invitation expirée
    ou déjà utilisée. L'appelant doit rafraîchir ses données.
    """

    def __init__(self, entity: str, ref: Any, reason: Optional[str] = None):
        self.entity = entity
        self.ref = ref
        self.reason = reason or f"{entity} {ref} no longer exists or is not accessible"
        super().__init__(self.reason)


class CategoryInUseError(Exception):
    def __init__(self, category_id: int, product_count: int):
        self.category_id = category_id
        self.product_count = product_count
        super().__init__(
            f"Category {category_id} is used by {product_count} product(s)"
        )


class AlreadyInFamilyError(Exception):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} already belongs to a family")


class FamilyPermissionError(Exception):
    def __init__(self, action: str):
        self.action = action
        super().__init__(f"Insufficient family role to {action}")
