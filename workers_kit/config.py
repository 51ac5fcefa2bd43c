from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .logging_utils import get_logger


logger = get_logger(__name__)


ENV_FILES_DEFAULT_ORDER = [".env", ".env.local"]

CONFIG_FILE = "worker-config.json"
PACKAGE_FILE = "package.json"

DEFAULT_SERVICE_NAME = "your-service"
DEFAULT_WORKERS_DOMAIN = "your-domain.workers.dev"
PLACEHOLDER_ACCOUNT_ID = "YOUR_ACCOUNT_ID"

API_TOKEN_ENV = "CLOUDFLARE_API_TOKEN"
ACCOUNT_ID_ENV = "CLOUDFLARE_ACCOUNT_ID"

# 배포 대상 환경 (순서 고정)
ENVIRONMENTS = ("dev", "qa", "prod")
# 태그로 배포되는 환경. dev 는 main 브랜치에서 계속 배포된다.
TAGGED_ENVIRONMENTS = ("qa", "prod")

SOURCE_CONFIG = "config"
SOURCE_PACKAGE = "package"
SOURCE_DEFAULT = "default"


def load_env_files(base_dir: str = ".",
                   files: Optional[List[str]] = None) -> None:
    """
    주어진 디렉토리에서 .env 계열 파일을 순서대로 로드한다.
    후순위 파일이 같은 키를 덮어쓴다.
    """
    order = files or ENV_FILES_DEFAULT_ORDER
    for name in order:
        path = os.path.join(base_dir, name)
        if os.path.exists(path):
            load_dotenv(path, override=True)


def read_json_file(path: str) -> Optional[Dict[str, Any]]:
    """
    JSON 파일을 dict 로 읽는다. 파일이 없거나 파싱에 실패하면 None.
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("JSON 파일을 읽을 수 없어 무시합니다: %s (%s)", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("JSON 최상위 값이 객체가 아니어서 무시합니다: %s", path)
        return None
    return data


def _get_bool(raw: Any, default: bool = False) -> bool:
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).lower() in {"1", "true", "yes", "y"}


@dataclass(frozen=True)
class ServiceConfig:
    service_name: str
    workers_domain: str
    account_id: str

    # prod 리소스 이름에 -prod 접미사를 붙이지 않을지 여부 (worker-config.json 의 prodUnsuffixed)
    prod_unsuffixed: bool = False

    config_file_present: bool = False
    service_name_source: str = SOURCE_DEFAULT
    domain_configured: bool = False

    @property
    def is_complete(self) -> bool:
        """
        자동 프로비저닝에 필요한 값이 모두 있는지.
        서비스 이름이 설정 파일에서 왔고, account id 가 플레이스홀더가 아니어야 한다.
        """
        return (
            self.service_name_source == SOURCE_CONFIG
            and bool(self.account_id)
            and self.account_id != PLACEHOLDER_ACCOUNT_ID
        )

    def worker_name(self, env: str) -> str:
        if env == "prod" and self.prod_unsuffixed:
            return self.service_name
        return f"{self.service_name}-{env}"

    def worker_names(self) -> List[str]:
        return [self.worker_name(env) for env in ENVIRONMENTS]

    def public_url(self, env: str) -> str:
        # prod 는 꾸밈 없는 공개 이름을 사용한다.
        if env == "prod":
            return f"https://{self.service_name}.{self.workers_domain}"
        return f"https://{self.service_name}-{env}.{self.workers_domain}"


def resolve_config(base_dir: str = ".") -> ServiceConfig:
    """
    한 번의 실행에서 사용할 ServiceConfig 를 결정한다.

    우선순위:
    - serviceName  : worker-config.json -> package.json name -> your-service
    - workersDomain: worker-config.json -> your-domain.workers.dev
    - accountId    : worker-config.json -> CLOUDFLARE_ACCOUNT_ID -> YOUR_ACCOUNT_ID
    """
    cfg_path = os.path.join(base_dir, CONFIG_FILE)
    raw = read_json_file(cfg_path)
    config_file_present = os.path.exists(cfg_path)
    data: Dict[str, Any] = raw or {}

    service_name = data.get("serviceName") or None
    source = SOURCE_CONFIG if service_name else SOURCE_DEFAULT
    if not service_name:
        pkg = read_json_file(os.path.join(base_dir, PACKAGE_FILE)) or {}
        if pkg.get("name"):
            service_name = str(pkg["name"])
            source = SOURCE_PACKAGE
    if not service_name:
        service_name = DEFAULT_SERVICE_NAME

    domain = data.get("workersDomain") or None
    account_id = data.get("accountId") or os.getenv(ACCOUNT_ID_ENV) or PLACEHOLDER_ACCOUNT_ID

    cfg = ServiceConfig(
        service_name=str(service_name),
        workers_domain=str(domain or DEFAULT_WORKERS_DOMAIN),
        account_id=str(account_id),
        prod_unsuffixed=_get_bool(data.get("prodUnsuffixed"), False),
        config_file_present=config_file_present,
        service_name_source=source,
        domain_configured=bool(domain),
    )
    logger.debug("Config resolved: %s", cfg)
    return cfg
