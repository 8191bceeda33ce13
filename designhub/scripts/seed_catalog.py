"""
Load the design-software and services catalog. Safe to re-run: rows are matched by name.
  python -m designhub.scripts.seed_catalog
"""
import logging
import sys

from sqlalchemy.orm import Session

from designhub.core.database import SessionLocal
from designhub.models import DesignSoftware, Service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

SOFTWARE = [
    ("Adobe Photoshop", "أدوبي فوتوشوب", "photo"),
    ("Adobe Illustrator", "أدوبي إليستريتور", "photo"),
    ("Adobe InDesign", "أدوبي إن ديزاين", "photo"),
    ("Adobe Premiere Pro", "أدوبي بريمير برو", "video"),
    ("Adobe After Effects", "أدوبي أفتر إفكتس", "video"),
    ("Final Cut Pro", "فاينال كت برو", "video"),
    ("DaVinci Resolve", "دافنشي ريزولف", "video"),
    ("Figma", "فيجما", "ui"),
    ("Sketch", "سكيتش", "ui"),
    ("Adobe XD", "أدوبي إكس دي", "ui"),
    ("Blender", "بلندر", "3d"),
    ("Cinema 4D", "سينما فور دي", "3d"),
    ("Maya", "مايا", "3d"),
    ("3ds Max", "ثري دي إس ماكس", "3d"),
    ("CorelDRAW", "كوريل درو", "photo"),
    ("Canva", "كانفا", "photo"),
]

# (name, name_ar, description, description_ar, price in halalas, category)
SERVICES = [
    (
        "Logo Design",
        "تصميم شعار",
        "Professional logo design for your brand identity",
        "تصميم شعار احترافي لهوية علامتك التجارية",
        50000,
        "photo",
    ),
    (
        "Business Card Design",
        "تصميم بطاقة عمل",
        "Custom business card design with modern aesthetics",
        "تصميم بطاقة عمل مخصصة بجماليات عصرية",
        15000,
        "photo",
    ),
    (
        "Social Media Post Design",
        "تصميم منشور لوسائل التواصل",
        "Eye-catching social media graphics for your campaigns",
        "رسومات جذابة لوسائل التواصل الاجتماعي لحملاتك",
        8000,
        "photo",
    ),
    (
        "Video Editing",
        "مونتاج فيديو",
        "Professional video editing with effects and transitions",
        "مونتاج فيديو احترافي مع المؤثرات والانتقالات",
        30000,
        "video",
    ),
    (
        "Motion Graphics",
        "موشن جرافيك",
        "Animated graphics and visual effects for videos",
        "رسومات متحركة ومؤثرات بصرية للفيديوهات",
        45000,
        "video",
    ),
    (
        "UI/UX Design",
        "تصميم واجهة المستخدم",
        "User interface and experience design for apps and websites",
        "تصميم واجهة وتجربة المستخدم للتطبيقات والمواقع",
        80000,
        "ui",
    ),
    (
        "3D Modeling",
        "نمذجة ثلاثية الأبعاد",
        "3D models for products, characters, and environments",
        "نماذج ثلاثية الأبعاد للمنتجات والشخصيات والبيئات",
        100000,
        "3d",
    ),
    (
        "Banner Design",
        "تصميم بانر",
        "Web banners and advertising graphics",
        "بانرات الويب والرسومات الإعلانية",
        12000,
        "photo",
    ),
]


def seed(db: Session) -> tuple[int, int]:
    """Insert missing catalog rows. Returns (software_inserted, services_inserted)."""
    known_software = {name for (name,) in db.query(DesignSoftware.name).all()}
    software_inserted = 0
    for name, name_ar, category in SOFTWARE:
        if name in known_software:
            continue
        db.add(DesignSoftware(name=name, name_ar=name_ar, category=category))
        software_inserted += 1

    known_services = {name for (name,) in db.query(Service.name).all()}
    services_inserted = 0
    for name, name_ar, description, description_ar, price, category in SERVICES:
        if name in known_services:
            continue
        db.add(
            Service(
                name=name,
                name_ar=name_ar,
                description=description,
                description_ar=description_ar,
                price=price,
                category=category,
                is_active=True,
            )
        )
        services_inserted += 1

    db.commit()
    return software_inserted, services_inserted


def main() -> int:
    db = SessionLocal()
    try:
        software_inserted, services_inserted = seed(db)
        logger.info(
            "Catalog seeded: software_inserted=%s, services_inserted=%s",
            software_inserted,
            services_inserted,
        )
        return 0
    except Exception as e:
        logger.exception("Catalog seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
