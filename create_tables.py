import asyncio

from leaders.db.session import init_models


async def create_all():
    # init_models importe tous les modules de modèles avant create_all
    await init_models()
    print("Toutes les tables ont été créées")

if __name__ == "__main__":
    asyncio.run(create_all())
