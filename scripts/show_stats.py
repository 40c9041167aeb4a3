import asyncio
from doccrawler.config import load_config
from doccrawler.storage import Storage


async def main() -> None:
    cfg = load_config()
    storage = Storage(cfg.mongo_url, cfg.mongo_db, cfg.mongo_collection)
    await storage.init()
    records = await storage.count_records()
    await storage.close()
    print({"collection": f"{cfg.mongo_db}.{cfg.mongo_collection}", "records": records})


if __name__ == "__main__":
    asyncio.run(main())
