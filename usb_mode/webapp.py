import logging

from . import config as cfgmod
from . import create_app

def main():
    cfg = cfgmod.load_config()
    logging.basicConfig(
        level=getattr(logging, str(cfg["logging"]["level"]).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app = create_app(cfg)
    srv = cfg["server"]
    app.run(host=srv["host"], port=int(srv["port"]), threaded=False)

if __name__ == "__main__":
    main()
