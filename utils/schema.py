from __future__ import annotations


def ensure_classes_table(conn) -> None:
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS classes (
            id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(100) NOT NULL,
            total_fees INT NOT NULL DEFAULT 0
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
    )
    conn.commit()


def ensure_students_table(conn) -> None:
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS students (
            id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(150) NOT NULL,
            class_id INT NULL,
            amount_paid DECIMAL(12,2) NOT NULL DEFAULT 0,
            INDEX idx_students_class (class_id),
            CONSTRAINT fk_students_class FOREIGN KEY (class_id) REFERENCES classes (id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
    )
    conn.commit()


def ensure_payments_table(conn) -> None:
    cur = conn.cursor()
    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS payments (
            id INT AUTO_INCREMENT PRIMARY KEY,
            student_id INT NOT NULL,
            amount_paid DECIMAL(12,2) NOT NULL,
            payment_date DATETIME NOT NULL,
            payment_method VARCHAR(64) NOT NULL,
            term VARCHAR(32) NOT NULL,
            session VARCHAR(32) NOT NULL,
            note TEXT NULL,
            reference_code VARCHAR(128) NOT NULL,
            INDEX idx_payments_student_date (student_id, payment_date),
            CONSTRAINT fk_payments_student FOREIGN KEY (student_id) REFERENCES students (id)
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
        """
    )
    conn.commit()


def ensure_core_tables(conn) -> None:
    """Create classes, students and payments (in dependency order). Safe to call repeatedly."""
    ensure_classes_table(conn)
    ensure_students_table(conn)
    ensure_payments_table(conn)
