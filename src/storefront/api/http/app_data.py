from dataclasses import dataclass

from src.storefront.core.services import (
    DbSessionService,
    ImageHost,
    JwtGeneratorService,
    JwtVerificationService,
    Mailer,
)


@dataclass
class ApplicationDependencies:
    jwt_verify_service: JwtVerificationService
    jwt_generation_service: JwtGeneratorService
    database_service: DbSessionService
    image_host: ImageHost
    mailer: Mailer
