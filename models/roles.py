import enum


class RoleEnum(enum.Enum):
    """
    Niveles de acceso de un docente. El valor es el nombre que viaja en el token
    y que se muestra en la UI.
    """

    ADMIN = "Administrador"
    SUPERVISOR = "Supervisor"
    PROFESOR = "Professor"

    @classmethod
    def parse(cls, raw) -> "RoleEnum":
        """
        Acepta el enum, el nombre ("SUPERVISOR") o el valor ("Supervisor").
        Lanza ValueError si no corresponde a ningún rol.
        """
        if isinstance(raw, cls):
            return raw
        text = (str(raw) if raw is not None else "").strip()
        for role in cls:
            if text.upper() == role.name or text.lower() == role.value.lower():
                return role
        raise ValueError(f"Nivel de acceso '{raw}' no encontrado.")
