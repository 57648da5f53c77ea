"""Static fleet catalog used to seed the ``bikes`` table."""

from decimal import Decimal

from .entities import Bike
from .enums import BikeCategory

SCOOTER, BIKES, ENFIELD, SPORTS = (
    BikeCategory.SCOOTER,
    BikeCategory.BIKES,
    BikeCategory.ROYAL_ENFIELD,
    BikeCategory.SPORTS,
)

FLEET: list[Bike] = [
    # Scooters
    Bike(15, "Suzuki Burgman", SCOOTER, Decimal(700), "Powerful, premium 125cc scooter", "/images/suzuki-burgman.jpg", "yellow"),
    Bike(16, "Honda Activa 125", SCOOTER, Decimal(700), "India's most-sold 125cc scooter", "/images/honda-activa-125.jpg", "black"),
    Bike(17, "TVS Jupiter 125", SCOOTER, Decimal(700), "Comfortable, full-features family scooter", "/images/tvs-jupiter-125.jpg", "orange"),
    Bike(18, "Honda Dio 125", SCOOTER, Decimal(700), "Sporty 125cc youth scooter", "/images/honda-dio-125.jpg", "teal"),
    Bike(19, "Ather 450X", SCOOTER, Decimal(900), "Tech-packed premium electric scooter", "/images/ather-450x.jpg", "teal"),
    # Bikes
    Bike(1, "Hero Xtreme 125r", BIKES, Decimal(700), "Sport-commuter staple", "/images/hero-xtreme-125r.jpg", "black"),
    Bike(3, "Honda Shine 125", BIKES, Decimal(700), "Smooth 125cc refined engine", "/images/honda-shine-125.jpg", "orange"),
    Bike(5, "Bajaj Pulsar 150", BIKES, Decimal(700), "Sport-commuter staple", "/images/bajaj-pulsar-150.jpg", "black"),
    Bike(6, "TVS Apache RTR 160 4V", BIKES, Decimal(900), "Sharp handling streetfighter", "/images/tvs-apache-rtr-160.jpg", "orange"),
    # Royal Enfield
    Bike(8, "RE Hunter 350", ENFIELD, Decimal(1500), "Compact urban cruiser (349cc)", "/images/re-hunter-350.jpg", "teal"),
    Bike(12, "RE Classic 350", ENFIELD, Decimal(1600), "Retro-styled cruiser", "/images/re-classic-350.jpg", "black"),
    # Sports
    Bike(9, "Bajaj Pulsar NS200", SPORTS, Decimal(1200), "Fiery naked sport-commuter", "/images/bajaj-pulsar-ns200.jpg", "orange"),
    Bike(10, "Yamaha R15 V4", SPORTS, Decimal(1800), "Supersport mini-bike, track DNA", "/images/yamaha-r15-v4.jpg", "teal"),
    Bike(11, "KTM Duke 390", SPORTS, Decimal(2200), "High-performance naked streetfighter", "/images/ktm-duke-390.jpg", "orange"),
]
