import asyncio
import os
import sys
from datetime import datetime, timezone

# Configuration pour pouvoir importer les modules du backend
sys.path.append(os.path.dirname(os.path.abspath(__file__)))
from database import connect_db, close_db, get_db
from models.common import UserRole


async def set_role(user_id: str, role: UserRole):
    """Promeut (ou rétrograde) un compte ; nécessaire pour appeler /api/admin."""
    await connect_db()
    try:
        result = await get_db().users.update_one(
            {"user_id": user_id},
            {"$set": {"role": role.value, "updated_at": datetime.now(timezone.utc)}},
        )
        if result.matched_count == 0:
            print(f"❌ Utilisateur {user_id} introuvable.")
        else:
            print(f"✅ Rôle mis à jour : {user_id} est maintenant '{role.value}' !")
    finally:
        await close_db()


if __name__ == "__main__":
    roles = [r.value for r in UserRole]
    if len(sys.argv) < 3 or sys.argv[2] not in roles:
        print("Usage : python set_role.py <user_id> <role>")
        print(f"Roles possibles : {', '.join(roles)}")
        sys.exit(1)

    asyncio.run(set_role(sys.argv[1], UserRole(sys.argv[2])))
