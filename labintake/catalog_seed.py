"""Initial test catalog. Prices in USD; search_name is derived on save."""

from .models import Category

CATALOG = [
    # Medical Testing & Panels
    ('Annual Check-Up Panel', Category.MEDICAL_TESTING_AND_PANELS, '99'),
    ('Female Comprehensive Panel', Category.MEDICAL_TESTING_AND_PANELS, '299'),
    ('Male Comprehensive Panel', Category.MEDICAL_TESTING_AND_PANELS, '199'),
    ('Hemoglobin A1c', Category.MEDICAL_TESTING_AND_PANELS, '29'),
    ('Thyroid Panel', Category.MEDICAL_TESTING_AND_PANELS, '99'),
    ('Lipid Panel (Cholesterol)', Category.MEDICAL_TESTING_AND_PANELS, '29'),
    ('17 Food Panel', Category.MEDICAL_TESTING_AND_PANELS, '99'),
    ('TB Blood Test', Category.MEDICAL_TESTING_AND_PANELS, '199'),
    ('TB Quantiferon Gold', Category.MEDICAL_TESTING_AND_PANELS, '199'),
    ('RA Factor (Rheumatoid)', Category.MEDICAL_TESTING_AND_PANELS, '39'),
    ('Progesterone', Category.MEDICAL_TESTING_AND_PANELS, '39'),
    ('PSA Total', Category.MEDICAL_TESTING_AND_PANELS, '30'),
    ('Testosterone Free & Total', Category.MEDICAL_TESTING_AND_PANELS, '40'),
    ('Prothrombin Time', Category.MEDICAL_TESTING_AND_PANELS, '40'),
    ('Liver Function Panel', Category.MEDICAL_TESTING_AND_PANELS, '25'),
    ('Comp. Metabolic Panel', Category.MEDICAL_TESTING_AND_PANELS, '29'),
    ('RH Factor', Category.MEDICAL_TESTING_AND_PANELS, '29'),
    ('Estradiol', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('HCG', Category.MEDICAL_TESTING_AND_PANELS, '40'),
    ('Diabetes Panel', Category.MEDICAL_TESTING_AND_PANELS, '50'),
    ('TSH', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Hepatitis A (HAV) Antibody', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Hepatitis B Surface Antigen', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Hepatitis C (HCV) Antibody', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Glucose', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Vitamin B12 & Folate', Category.MEDICAL_TESTING_AND_PANELS, '59'),
    ('Vitamin D 25-Hydroxy', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('ESR/Sed Rate', Category.MEDICAL_TESTING_AND_PANELS, '49'),
    ('Urinalysis Complete', Category.MEDICAL_TESTING_AND_PANELS, '20'),
    ('CBC w/Differential', Category.MEDICAL_TESTING_AND_PANELS, '10'),

    # STD Testing
    ('Basic STD Panel', Category.STD_TESTING, '129'),
    ('Comprehensive STD Panel (Hep B & C)', Category.STD_TESTING, '169'),
    ('HIV Screen', Category.STD_TESTING, '40'),
    ('Trichomonas Urine', Category.STD_TESTING, '89'),
    ('Syphilis (RPR)', Category.STD_TESTING, '39'),
    ('Herpes Simplex 1/2 IgG', Category.STD_TESTING, '40'),
    ('Chlamydia/Gonorrhea', Category.STD_TESTING, '79'),
    ('Comprehensive STD Panel Plus', Category.STD_TESTING, '149'),

    # Drug Testing
    ('Drug Screening and Confirmation', Category.DRUG_TESTING, '140'),

    # Respiratory Testing
    ('Respiratory pathogens panel (Virus and Bacterial)', Category.RESPIRATORY_TESTING, '120'),
    ('Respiratory Panel (Viral only)', Category.RESPIRATORY_TESTING, '80'),
    ('Covid-19', Category.RESPIRATORY_TESTING, '65'),

    # UTI Testing
    ('UTI (Urinary Tract Infection)', Category.UTI_TESTING, '149'),

    # Wound Testing
    ('Fungal Panel', Category.WOUND_TESTING, '120'),
    ('Wound Panel', Category.WOUND_TESTING, '120'),
    ('Wound and Fungal Panel', Category.WOUND_TESTING, '180'),

    # Gastrointestinal Testing
    ('GI Comprehensive Panel', Category.GASTROINTESTINAL_TESTING, '150'),
    ('H. pylori', Category.GASTROINTESTINAL_TESTING, '75'),
]
