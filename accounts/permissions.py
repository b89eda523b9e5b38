from rest_framework.permissions import DjangoModelPermissions, BasePermission


class DjangoModelPermissionsWithView(DjangoModelPermissions):

    perms_map = DjangoModelPermissions.perms_map.copy()
    perms_map.update({
        "GET":    ["%(app_label)s.view_%(model_name)s"],
        "HEAD":   ["%(app_label)s.view_%(model_name)s"],
    })


class HasRequiredPerms(BasePermission):
    """
    For action endpoints that do not map onto a model verb (upload, generate,
    approve ...): the view lists the codenames it needs in ``required_perms``.
    """

    def has_permission(self, request, view):
        u = request.user
        if not (u and u.is_authenticated):
            return False
        return u.has_perms(getattr(view, "required_perms", ()))


class IsAdminGroup(BasePermission):
    def has_permission(self, request, view):
        u = request.user
        return bool(
            u and u.is_authenticated and (u.is_superuser or u.groups.filter(name="Admin").exists())
        )
