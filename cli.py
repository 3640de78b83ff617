"""
CLI интерфейс реестра геммологических сертификатов
"""
import argparse
import logging
import sys
from typing import Optional

from config.settings import get_settings, load_settings_from_file, setup_logging
from gemcert.exceptions import (
    CertificateError, DuplicateCertificateError, MissingFieldError, StoreUnavailableError
)
from gemcert.models import Certificate, CertificateDraft
from gemcert.service import CertificateService, get_certificate_service


class CertificateCLI:
    """CLI интерфейс для работы с сертификатами"""

    def __init__(self, service: Optional[CertificateService] = None):
        self._service = service
        self.logger = logging.getLogger(__name__)

    @property
    def service(self) -> CertificateService:
        if self._service is None:
            self._service = get_certificate_service()
        return self._service

    def init_database(self, args):
        """Создание таблиц и перенос образцов в БД"""
        db_manager = self.service.repository.db_manager
        try:
            db_manager.create_tables()
            print("✓ Таблицы базы данных созданы")

            if args.with_samples:
                inserted = self.service.repository.import_records(self.service.seed_set.all())
                print(f"✓ Образцов перенесено в БД: {inserted}")
        except CertificateError as e:
            print(f"✗ Ошибка подготовки БД: {e}")
            sys.exit(1)
        except Exception as e:
            print(f"✗ Ошибка подготовки БД: {e}")
            self.logger.error(f"Ошибка подготовки БД: {e}")
            sys.exit(1)

    def register_certificate(self, args):
        """Регистрация сертификата через CLI"""
        draft = CertificateDraft(
            certificate_number=args.number,
            gemstone_type=args.gemstone_type,
            carat_weight=args.carat_weight,
            color=args.color,
            clarity=args.clarity,
            cut=args.cut,
            polish=args.polish,
            symmetry=args.symmetry,
            fluorescence=args.fluorescence,
            measurements=args.measurements,
            origin=args.origin,
            issue_date=args.issue_date,
            image_url=args.image_url
        )

        try:
            certificate = self.service.register_certificate(draft)
        except MissingFieldError as e:
            print(f"✗ Ошибка валидации: {e}")
            sys.exit(1)
        except DuplicateCertificateError as e:
            print(f"✗ {e}")
            sys.exit(1)
        except StoreUnavailableError as e:
            print(f"✗ База данных недоступна: {e}")
            sys.exit(1)
        except CertificateError as e:
            print(f"✗ Ошибка: {e}")
            sys.exit(1)

        print("✓ Сертификат успешно зарегистрирован:")
        self._print_certificate(certificate)

    def lookup_certificate(self, args):
        """Поиск сертификата через CLI"""
        certificate_number = args.certificate_number

        try:
            certificate = self.service.lookup_certificate(certificate_number)
        except CertificateError as e:
            print(f"✗ Ошибка поиска: {e}")
            sys.exit(1)

        if certificate is None:
            print(f"✗ Сертификат {certificate_number} не найден")
            return

        print("✓ Сертификат найден:")
        self._print_certificate(certificate)

    def list_certificates(self, args):
        """Список сертификатов"""
        try:
            certificates = self.service.list_certificates()
        except CertificateError as e:
            print(f"✗ Ошибка получения списка: {e}")
            sys.exit(1)

        print("Сертификаты реестра:")
        if not certificates:
            print("  Сертификаты не найдены")
            return

        for certificate in certificates:
            marker = " (образец)" if certificate.is_sample else ""
            print(f"  {certificate.certificate_number} - {certificate.gemstone_type}, "
                  f"{certificate.carat_weight} ct{marker}")

    def show_statistics(self, args):
        """Статистика реестра"""
        stats = self.service.get_statistics()
        database = stats["database"]

        print("Статистика реестра:")
        if database["available"]:
            print(f"  В базе данных: {database['total_certificates']}")
        else:
            print("  База данных: ✗ недоступна")
        print(f"  Образцов: {stats['sample_certificates']}")

    @staticmethod
    def _print_certificate(certificate: Certificate):
        print(f"  Номер: {certificate.certificate_number}")
        print(f"  Камень: {certificate.gemstone_type}")
        print(f"  Вес: {certificate.carat_weight} ct")
        print(f"  Цвет: {certificate.color}")
        print(f"  Чистота: {certificate.clarity}")
        print(f"  Огранка: {certificate.cut}")
        print(f"  Полировка / симметрия: {certificate.polish} / {certificate.symmetry}")
        print(f"  Флуоресценция: {certificate.fluorescence}")
        print(f"  Размеры: {certificate.measurements}")
        print(f"  Происхождение: {certificate.origin}")
        print(f"  Дата выдачи: {certificate.issue_date}")
        if certificate.image_url:
            print(f"  Фото: {certificate.image_url}")
        if certificate.created_at:
            print(f"  Зарегистрирован: {certificate.created_at.strftime('%d.%m.%Y %H:%M')}")

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="Реестр геммологических сертификатов",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Примеры использования:
  %(prog)s init-db --with-samples
  %(prog)s register --number GIE-2024-009999 --gemstone-type "Natural Diamond" --carat-weight 1.01 ...
  %(prog)s lookup gie-2024-001234
  %(prog)s list
            """
        )
        parser.add_argument('--env-file', help='Файл с переменными окружения')

        subparsers = parser.add_subparsers(dest='command', help='Доступные команды')

        init_parser = subparsers.add_parser('init-db', help='Создание таблиц БД')
        init_parser.add_argument('--with-samples', action='store_true', help='Перенести образцы в БД')

        reg_parser = subparsers.add_parser('register', help='Регистрация сертификата')
        reg_parser.add_argument('--number', required=True, help='Номер сертификата')
        reg_parser.add_argument('--gemstone-type', required=True, help='Тип камня')
        reg_parser.add_argument('--carat-weight', required=True, help='Вес в каратах')
        reg_parser.add_argument('--color', required=True, help='Цвет')
        reg_parser.add_argument('--clarity', required=True, help='Чистота')
        reg_parser.add_argument('--cut', required=True, help='Огранка')
        reg_parser.add_argument('--polish', required=True, help='Полировка')
        reg_parser.add_argument('--symmetry', required=True, help='Симметрия')
        reg_parser.add_argument('--fluorescence', required=True, help='Флуоресценция')
        reg_parser.add_argument('--measurements', required=True, help='Размеры')
        reg_parser.add_argument('--origin', required=True, help='Происхождение')
        reg_parser.add_argument('--issue-date', help='Дата выдачи (по умолчанию сегодня)')
        reg_parser.add_argument('--image-url', help='Ссылка на фото')

        lookup_parser = subparsers.add_parser('lookup', help='Поиск сертификата')
        lookup_parser.add_argument('certificate_number', help='Номер сертификата')

        subparsers.add_parser('list', help='Список сертификатов')
        subparsers.add_parser('stats', help='Статистика реестра')

        return parser

    def main(self, argv=None):
        """Главная функция CLI"""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if not args.command:
            parser.print_help()
            return

        settings = load_settings_from_file(args.env_file) if args.env_file else get_settings()
        setup_logging(settings)

        handlers = {
            'init-db': self.init_database,
            'register': self.register_certificate,
            'lookup': self.lookup_certificate,
            'list': self.list_certificates,
            'stats': self.show_statistics,
        }
        handlers[args.command](args)


if __name__ == '__main__':
    cli = CertificateCLI()
    cli.main()
